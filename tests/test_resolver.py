"""Tests for configuration resolution and query serialization."""

from interfetch import FetchConfig, clean_params, merge_configs, resolve_config, serialize_query
from interfetch.resolver import is_absolute_url, join_url


class TestMergeConfigs:
    def test_override_wins_at_nested_keys(self):
        base = {"headers": {"A": "1", "B": "1"}, "timeout": 5}
        override = {"headers": {"B": "2"}}

        assert merge_configs(base, override) == {"headers": {"A": "1", "B": "2"}, "timeout": 5}

    def test_lists_are_replaced(self):
        merged = merge_configs({"params": {"ids": [1, 2]}}, {"params": {"ids": [3]}})

        assert merged == {"params": {"ids": [3]}}

    def test_inputs_not_mutated(self):
        base = {"headers": {"A": "1"}}
        override = {"headers": {"B": "2"}}

        merge_configs(base, override)

        assert base == {"headers": {"A": "1"}}
        assert override == {"headers": {"B": "2"}}


class TestResolveConfig:
    def test_url_string(self):
        config = resolve_config("/users", {"method": "post"}, FetchConfig(base_url="https://api.test"))

        assert config.url == "/users"
        assert config.method == "POST"
        assert config.base_url == "https://api.test"

    def test_method_defaults_to_get(self):
        config = resolve_config("/users", None, FetchConfig())

        assert config.method == "GET"

    def test_config_object_as_request(self):
        request = FetchConfig(url="/users", method="delete", headers={"X-Call": "1"})

        config = resolve_config(request, None, FetchConfig(headers={"X-Default": "1"}))

        assert config.url == "/users"
        assert config.method == "DELETE"
        assert config.headers == {"X-Default": "1", "X-Call": "1"}

    def test_mapping_as_request(self):
        config = resolve_config({"url": "/users", "timeout": 2}, None, FetchConfig(timeout=10))

        assert config.url == "/users"
        assert config.timeout == 2

    def test_absolute_url_drops_base_url(self):
        defaults = FetchConfig(base_url="https://api.test")

        assert resolve_config("http://other.test/x", None, defaults).base_url is None
        assert resolve_config("https://other.test/x", None, defaults).base_url is None
        assert resolve_config("/x", None, defaults).base_url == "https://api.test"

    def test_call_site_wins(self):
        defaults = FetchConfig(timeout=10, headers={"Accept": "text/plain"}, raw=True)

        config = resolve_config("/x", {"timeout": 1, "headers": {"Accept": "application/json"}}, defaults)

        assert config.timeout == 1
        assert config.headers == {"Accept": "application/json"}
        assert config.raw is True

    def test_defaults_untouched_by_mutation(self):
        defaults = FetchConfig(headers={"A": "1"}, params={"ids": [1]})

        config = resolve_config("/x", None, defaults)
        config.headers["B"] = "2"
        config.params["ids"].append(2)

        assert defaults.headers == {"A": "1"}
        assert defaults.params == {"ids": [1]}

    def test_extra_keys_kept(self):
        config = resolve_config("/x", {"data": {"name": "value"}}, FetchConfig())

        assert config.model_extra == {"data": {"name": "value"}}

    def test_xsrf_defaults(self):
        config = resolve_config("/x", None, FetchConfig())

        assert config.xsrf_cookie_name == "XSRF-TOKEN"
        assert config.xsrf_header_name == "X-XSRF-TOKEN"

    def test_header_values_become_strings(self):
        config = resolve_config("/x", {"headers": {"X-Test": 1, "X-Flag": True}}, FetchConfig())

        assert config.headers == {"X-Test": "1", "X-Flag": "True"}
        assert FetchConfig(headers={"X-Test": 1}).headers == {"X-Test": "1"}


class TestCleanParams:
    def test_drops_empty_and_dedupes(self):
        params = {"a": 1, "b": None, "d": "", "e": [], "f": [2, 2, 3]}

        assert clean_params(params) == {"a": 1, "f": [2, 3]}

    def test_keeps_falsy_scalars(self):
        assert clean_params({"zero": 0, "off": False}) == {"zero": 0, "off": False}

    def test_keeps_first_seen_order(self):
        assert clean_params({"tags": ["b", "a", "b", "c", "a"]}) == {"tags": ["b", "a", "c"]}

    def test_does_not_mutate_input(self):
        params = {"a": None, "f": [1, 1]}

        clean_params(params)

        assert params == {"a": None, "f": [1, 1]}


def test_serialize_query_brackets_lists():
    assert serialize_query({"page": 2, "ids": [1, 1, 2], "q": ""}) == {"page": 2, "ids[]": [1, 2]}


def test_is_absolute_url():
    assert is_absolute_url("https://api.test")
    assert is_absolute_url("HTTP://api.test")
    assert not is_absolute_url("/path")
    assert not is_absolute_url("httpbin/path")
    assert not is_absolute_url(None)


def test_join_url():
    assert join_url("https://api.test/", "/users") == "https://api.test/users"
    assert join_url("https://api.test/v1", "users") == "https://api.test/v1/users"
    assert join_url("https://api.test", "https://other.test/x") == "https://other.test/x"
    assert join_url(None, "/users") == "/users"
    assert join_url("https://api.test", "") == "https://api.test"
