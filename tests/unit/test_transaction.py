"""Test UnitOfWork commit and compensating rollback."""

import logging

import pytest

from diploma_registry.registry.transaction import UnitOfWork


class _Boom(Exception):
    pass


def _fail():
    raise _Boom("step failed")


class TestCommit:
    def test_applies_in_order(self):
        calls: list[str] = []
        uow = UnitOfWork("t")
        uow.add("a", lambda: calls.append("a"))
        uow.add("b", lambda: calls.append("b"))
        uow.commit()
        assert calls == ["a", "b"]
        assert uow.committed is True

    def test_nothing_applied_before_commit(self):
        calls: list[str] = []
        uow = UnitOfWork("t")
        uow.add("a", lambda: calls.append("a"))
        assert calls == []
        assert uow.step_names == ["a"]

    def test_commit_twice_rejected(self):
        uow = UnitOfWork("t")
        uow.commit()
        with pytest.raises(RuntimeError, match="already committed"):
            uow.commit()

    def test_add_after_commit_rejected(self):
        uow = UnitOfWork("t")
        uow.commit()
        with pytest.raises(RuntimeError):
            uow.add("late", lambda: None)


class TestRollback:
    def test_undoes_applied_steps_in_reverse(self):
        calls: list[str] = []
        uow = UnitOfWork("t")
        uow.add("a", lambda: calls.append("a"), lambda: calls.append("undo a"))
        uow.add("b", lambda: calls.append("b"), lambda: calls.append("undo b"))
        uow.add("c", _fail, lambda: calls.append("undo c"))
        with pytest.raises(_Boom):
            uow.commit()
        assert calls == ["a", "b", "undo b", "undo a"]
        assert uow.committed is False

    def test_first_step_failure_undoes_nothing(self):
        calls: list[str] = []
        uow = UnitOfWork("t")
        uow.add("a", _fail, lambda: calls.append("undo a"))
        with pytest.raises(_Boom):
            uow.commit()
        assert calls == []

    def test_step_without_undo_skipped(self):
        calls: list[str] = []
        uow = UnitOfWork("t")
        uow.add("a", lambda: calls.append("a"), lambda: calls.append("undo a"))
        uow.add("b", lambda: calls.append("b"))
        uow.add("c", _fail)
        with pytest.raises(_Boom):
            uow.commit()
        assert calls == ["a", "b", "undo a"]

    def test_failing_undo_does_not_stop_rollback(self, caplog):
        calls: list[str] = []

        def bad_undo():
            raise OSError("cannot undo")

        uow = UnitOfWork("t")
        uow.add("a", lambda: calls.append("a"), lambda: calls.append("undo a"))
        uow.add("b", lambda: calls.append("b"), bad_undo)
        uow.add("c", _fail)
        with caplog.at_level(logging.ERROR):
            with pytest.raises(_Boom):
                uow.commit()
        assert calls == ["a", "b", "undo a"]
        assert "undo of 'b' failed" in caplog.text
