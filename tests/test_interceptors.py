"""Tests for the interceptor registry."""

import dataclasses

import pytest

from interfetch import InterceptorEntry, InterceptorManager


def identity(value):
    return value


def handle_error(error):
    return None


class TestUse:
    def test_handles_increase(self):
        manager = InterceptorManager()

        assert manager.use(identity) == 0
        assert manager.use(identity) == 1
        assert manager.use(None, handle_error) == 2
        assert len(manager) == 3

    def test_entry_fields(self):
        manager = InterceptorManager()
        predicate = lambda config: True  # noqa: E731

        manager.use(identity, handle_error, synchronous=True, run_when=predicate)

        (entry,) = list(manager)
        assert entry.on_fulfilled is identity
        assert entry.on_rejected is handle_error
        assert entry.synchronous is True
        assert entry.run_when is predicate

    def test_defaults(self):
        manager = InterceptorManager()
        manager.use(identity)

        (entry,) = list(manager)
        assert entry.on_rejected is None
        assert entry.synchronous is False
        assert entry.run_when is None

    def test_entries_are_immutable(self):
        entry = InterceptorEntry(identity)

        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.synchronous = True


class TestEject:
    def test_eject_removes_only_that_entry(self):
        manager = InterceptorManager()
        first = lambda v: "first"  # noqa: E731
        second = lambda v: "second"  # noqa: E731
        third = lambda v: "third"  # noqa: E731
        manager.use(first)
        handle = manager.use(second)
        manager.use(third)

        manager.eject(handle)

        assert [entry.on_fulfilled for entry in manager] == [first, third]
        assert handle not in manager
        assert 0 in manager and 2 in manager

    def test_eject_twice_is_noop(self):
        manager = InterceptorManager()
        handle = manager.use(identity)

        manager.eject(handle)
        manager.eject(handle)

        assert len(manager) == 0

    def test_eject_unknown_handle_is_noop(self):
        manager = InterceptorManager()
        manager.use(identity)

        manager.eject(42)
        manager.eject(-1)

        assert len(manager) == 1

    def test_other_handles_stay_valid(self):
        manager = InterceptorManager()
        a = manager.use(identity)
        b = manager.use(identity)

        manager.eject(a)
        manager.eject(b)

        assert len(manager) == 0


class TestClear:
    def test_clear_empties_registry(self):
        manager = InterceptorManager()
        manager.use(identity)
        manager.use(identity)

        manager.clear()

        visited = []
        manager.for_each(visited.append)
        assert visited == []

    def test_old_handles_do_not_match_new_entries(self):
        manager = InterceptorManager()
        old = manager.use(identity)
        manager.clear()

        new = manager.use(handle_error)
        manager.eject(old)

        assert new != old
        assert [entry.on_fulfilled for entry in manager] == [handle_error]


class TestTraversal:
    def test_for_each_registration_order(self):
        manager = InterceptorManager()
        functions = [lambda v, i=i: i for i in range(5)]
        for fn in functions:
            manager.use(fn)

        visited = []
        manager.for_each(lambda entry: visited.append(entry.on_fulfilled))

        assert visited == functions

    def test_eject_during_traversal(self):
        manager = InterceptorManager()
        handles = [manager.use(identity) for _ in range(3)]

        visited = 0
        for _ in manager:
            visited += 1
            manager.eject(handles[-1])

        assert visited == 3
        assert len(manager) == 2
