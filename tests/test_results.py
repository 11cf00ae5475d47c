"""Tests for ``sqlpipe.results``."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from sqlpipe.errors import NoRowsError
from sqlpipe.results import ExecResult, Row, RowSet


class TestExecResult:
    def test_defaults(self):
        result = ExecResult()
        assert result.rowcount == -1
        assert result.lastrowid is None


class TestRowSet:
    def test_iterates_dicts(self):
        rows = RowSet(["a", "b"], [(1, 2), (3, 4)])
        assert list(rows) == [{"a": 1, "b": 2}, {"a": 3, "b": 4}]

    def test_close_called_once_on_exhaustion(self):
        close = Mock()
        rows = RowSet(["a"], [(1,)], close)
        rows.fetchall()
        rows.close()
        close.assert_called_once_with()

    def test_closed_rowset_yields_nothing(self):
        rows = RowSet(["a"], [(1,), (2,)])
        rows.close()
        assert rows.fetchone() is None

    def test_context_manager_closes(self):
        close = Mock()
        with RowSet(["a"], [(1,), (2,)], close) as rows:
            assert rows.fetchone() == {"a": 1}
        close.assert_called_once_with()


class TestRow:
    def test_requires_rows_or_error(self):
        with pytest.raises(ValueError):
            Row()

    def test_failed_row_raises_on_scan(self):
        error = RuntimeError("boom")
        row = Row.failed(error)
        with pytest.raises(RuntimeError) as exc_info:
            row.scan()
        assert exc_info.value is error

    def test_empty_raises_no_rows(self):
        row = Row(RowSet(["a"], []))
        with pytest.raises(NoRowsError, match="no rows"):
            row.scalar()

    def test_scan_closes_rowset(self):
        close = Mock()
        row = Row(RowSet(["a"], [(1,), (2,)], close))
        assert row.scan() == {"a": 1}
        close.assert_called_once_with()
