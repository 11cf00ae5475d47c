"""Tests for ``sqlpipe.qualifier``: composing filters onto SELECTs."""

from __future__ import annotations

import pytest
from sqlalchemy import column, select, table

from sqlpipe.qualifier import by_eq, by_equality, by_id, qualify


@pytest.fixture
def things():
    return table("things", column("id"), column("a"), column("b"), column("c"))


class TestById:
    def test_adds_id_condition(self, builder, things):
        sql, args = builder.build(by_id(5)(select(things)))
        assert "WHERE id = ?" in sql
        assert args == [5]

    def test_repeated_invocation_builds_same_statement(self, builder, things):
        qualifier = by_id(5)
        base = select(things)
        first = builder.build(qualifier(base))
        second = builder.build(qualifier(base))
        assert first == second

    def test_does_not_mutate_input(self, builder, things):
        base = select(things)
        before = builder.build(base)
        qualified = by_id(5)(base)
        assert qualified is not base
        assert builder.build(base) == before
        assert "WHERE" not in before[0]


class TestByEq:
    def test_conditions_anded_in_field_order(self, builder, things):
        sql, args = builder.build(by_eq({"c": 3, "a": 1, "b": 2})(select(things)))
        assert "WHERE a = ? AND b = ? AND c = ?" in sql
        assert args == [1, 2, 3]

    def test_none_is_null(self, builder, things):
        sql, args = builder.build(by_eq({"a": None})(select(things)))
        assert "a IS NULL" in sql
        assert args == []

    def test_list_is_in(self, builder, things):
        sql, args = builder.build(by_eq({"a": [3, 1, 2]})(select(things)))
        assert "a IN (?, ?, ?)" in sql
        assert args == [3, 1, 2]

    def test_set_is_in_sorted(self, builder, things):
        _, args = builder.build(by_eq({"a": {3, 1, 2}})(select(things)))
        assert args == [1, 2, 3]

    def test_set_of_mixed_types_is_in(self, builder, things):
        _, args = builder.build(by_eq({"a": {1, "x"}})(select(things)))
        assert sorted(args, key=repr) == args
        assert set(args) == {1, "x"}

    def test_table_qualified_field(self, builder, things):
        sql, args = builder.build(by_eq({"things.id": 1})(select(things)))
        assert "WHERE things.id = ?" in sql
        assert "FROM things WHERE things.id = ?" in " ".join(sql.split())
        assert args == [1]

    def test_table_qualified_field_filters_rows(self, db, users, builder):
        db.execute("INSERT INTO users (name) VALUES (?)", ("ada",))
        db.execute("INSERT INTO users (name) VALUES (?)", ("bob",))
        sql, args = builder.build(by_eq({"users.name": "bob"})(select(users)))
        assert [r["name"] for r in db.query(sql, args).fetchall()] == ["bob"]

    def test_empty_map_is_identity(self, things):
        base = select(things)
        assert by_eq({})(base) is base

    def test_alias(self):
        assert by_equality is by_eq


class TestQualify:
    def test_application_order_is_text_order(self, builder, things):
        stmt = qualify(select(things), by_eq({"a": 1}), by_eq({"b": 2}))
        sql, args = builder.build(stmt)
        assert sql.index("a = ?") < sql.index("b = ?")
        assert args == [1, 2]

    def test_reversed_order(self, builder, things):
        stmt = qualify(select(things), by_eq({"b": 2}), by_eq({"a": 1}))
        sql, args = builder.build(stmt)
        assert sql.index("b = ?") < sql.index("a = ?")
        assert args == [2, 1]

    def test_same_field_conjuncts(self, builder, things):
        stmt = qualify(select(things), by_id(1), by_id(2))
        sql, args = builder.build(stmt)
        assert "WHERE id = ? AND id = ?" in sql
        assert args == [1, 2]

    def test_no_qualifiers(self, things):
        base = select(things)
        assert qualify(base) is base

    def test_filters_rows(self, db, users, builder):
        db.execute("INSERT INTO users (name, email) VALUES (?, ?)", ("ada", "a@x"))
        db.execute("INSERT INTO users (name, email) VALUES (?, ?)", ("bob", None))
        sql, args = builder.build(qualify(select(users), by_eq({"email": None})))
        rows = db.query(sql, args).fetchall()
        assert [r["name"] for r in rows] == ["bob"]
