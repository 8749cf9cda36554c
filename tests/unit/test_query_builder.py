"""
Unit tests for the QueryBuilder statement builder.

Covers statement heads, clause ordering, placeholder/value alignment and
argument validation.
"""

import pytest
from ff_query import IllegalStateError, InvalidArgumentError, Operator, QueryBuilder, StatementType


class TestStatementHeads:
    """Test rendering of SELECT / INSERT / UPDATE / DELETE without clauses."""

    def test_select_columns(self):
        """Test that a plain SELECT renders column list and table."""
        qb = QueryBuilder().select("users", ["id", "name"])
        assert qb.to_sql() == "SELECT id,name FROM users"
        assert qb.kind is StatementType.SELECT
        assert qb.values == []

    def test_select_defaults_to_star(self):
        """Test that SELECT without columns selects everything."""
        assert QueryBuilder().select("users").to_sql() == "SELECT * FROM users"

    def test_select_without_table_omits_from(self):
        """Test that an empty table name drops the FROM clause."""
        assert QueryBuilder().select("", ["1"]).to_sql() == "SELECT 1"

    def test_select_rejects_mapping(self):
        """Test that SELECT columns cannot be a mapping."""
        qb = QueryBuilder()
        with pytest.raises(InvalidArgumentError):
            qb.select("users", {"id": 1})
        assert qb.kind is None

    def test_insert_mapping(self):
        """Test that a mapping INSERT renders VALUES and collects values in order."""
        qb = QueryBuilder().insert("users", {"name": "Bo", "age": 30})
        assert qb.to_sql() == "INSERT INTO users(name,age) VALUES(?,?)"
        assert qb.values == ["Bo", 30]
        assert qb.is_column_mapping is True

    def test_insert_list_has_no_values_clause(self):
        """Test that a list INSERT only names the columns."""
        qb = QueryBuilder().insert("archive", ["id", "name"])
        assert qb.to_sql() == "INSERT INTO archive(id,name)"
        assert qb.values == []
        assert qb.is_column_mapping is False

    def test_update_mapping(self):
        """Test that UPDATE renders one assignment per key."""
        qb = QueryBuilder().update("users", {"age": 31, "name": "Bo"})
        assert qb.to_sql() == "UPDATE users SET age=?,name=?"
        assert qb.values == [31, "Bo"]

    def test_update_requires_mapping(self):
        """Test that UPDATE with a plain list is rejected."""
        with pytest.raises(InvalidArgumentError, match="must contain key and value"):
            QueryBuilder().update("users", ["age"])

    def test_update_rejects_empty_mapping(self):
        """Test that UPDATE needs at least one column."""
        with pytest.raises(InvalidArgumentError):
            QueryBuilder().update("users", {})

    def test_delete(self):
        """Test that DELETE without clauses renders the bare statement."""
        assert QueryBuilder().delete("users").to_sql() == "DELETE FROM users"

    def test_unshaped_builder_renders_empty(self):
        """Test that a builder without a statement renders nothing."""
        qb = QueryBuilder()
        assert qb.kind is None
        assert qb.to_sql() == ""
        assert str(qb) == ""


class TestClauses:
    """Test clause rendering and ordering."""

    def test_update_with_where(self):
        """Test that SET values come before WHERE values."""
        qb = QueryBuilder().update("users", {"age": 31}).where("id", Operator.EQ, 5)
        assert qb.to_sql() == "UPDATE users SET age=? WHERE id = ?"
        assert qb.values == [31, 5]

    def test_where_default_glue_is_and(self):
        """Test that chained conditions are joined with AND and no glue trails."""
        qb = QueryBuilder().select("users").where("age", ">", 18).where("status", "=", "active")
        assert qb.to_sql() == "SELECT * FROM users WHERE age > ? AND status = ?"
        assert qb.values == [18, "active"]

    def test_where_or_glue(self):
        """Test that the glue of a condition joins it to the next one."""
        qb = (
            QueryBuilder()
            .select("users")
            .where("role", "=", "admin", "OR")
            .where("role", "=", "owner", "OR")
        )
        sql = qb.to_sql()
        assert sql == "SELECT * FROM users WHERE role = ? OR role = ?"
        assert not sql.endswith("OR")

    def test_where_rejects_unknown_glue(self):
        """Test that glue must be AND or OR."""
        with pytest.raises(InvalidArgumentError):
            QueryBuilder().select("users").where("id", "=", 1, "XOR")

    def test_where_rejects_unknown_operator(self):
        """Test that an unrecognised operator string is rejected."""
        with pytest.raises(InvalidArgumentError, match="Operator not valid"):
            QueryBuilder().select("users").where("id", "!=", 1)

    def test_join(self):
        """Test that a join renders its equality conditions."""
        qb = QueryBuilder().select("users").join("INNER", "orders", {"users.id": "orders.user_id"})
        assert qb.to_sql() == "SELECT * FROM users INNER JOIN orders ON users.id=orders.user_id"

    def test_join_multiple_conditions(self):
        """Test that join conditions are joined with AND."""
        qb = QueryBuilder().select("a").join("LEFT", "b", {"a.x": "b.x", "a.y": "b.y"})
        assert qb.to_sql() == "SELECT * FROM a LEFT JOIN b ON a.x=b.x AND a.y=b.y"

    def test_join_rejects_unknown_type_without_mutation(self):
        """Test that an unsupported join type fails before any state change."""
        qb = QueryBuilder().select("users")
        with pytest.raises(InvalidArgumentError, match="Unrecognized join type"):
            qb.join("CROSS", "orders", {"users.id": "orders.user_id"})
        assert qb.to_sql() == "SELECT * FROM users"

    def test_join_type_is_case_sensitive(self):
        """Test that lowercase join types are rejected."""
        with pytest.raises(InvalidArgumentError):
            QueryBuilder().select("users").join("inner", "orders", {"a": "b"})

    def test_join_requires_mapping(self):
        """Test that join conditions must be a mapping."""
        with pytest.raises(InvalidArgumentError):
            QueryBuilder().select("users").join("INNER", "orders", ["users.id"])

    def test_full_clause_order(self):
        """Test that clauses render in SQL order regardless of call order."""
        qb = (
            QueryBuilder()
            .select("orders", ["user_id", "COUNT(*)"])
            .offset(10)
            .limit(5)
            .order("user_id", "desc")
            .having("COUNT(*)", ">", 2)
            .group("user_id")
            .where("status", "=", "paid")
            .join("INNER", "users", {"users.id": "orders.user_id"})
        )
        assert qb.to_sql() == (
            "SELECT user_id,COUNT(*) FROM orders "
            "INNER JOIN users ON users.id=orders.user_id "
            "WHERE status = ? "
            "GROUP BY user_id "
            "HAVING COUNT(*) > ? "
            "ORDER BY user_id DESC "
            "LIMIT 5 OFFSET 10"
        )

    def test_values_follow_render_order(self):
        """Test that HAVING values come after WHERE values even if added first."""
        qb = (
            QueryBuilder()
            .select("orders", ["user_id"])
            .having("COUNT(*)", ">", 2)
            .where("status", "=", "paid")
            .group("user_id")
        )
        assert qb.values == ["paid", 2]

    def test_group_multiple_columns(self):
        """Test that group() accepts several columns and can be repeated."""
        qb = QueryBuilder().select("t").group("a", "b").group("c")
        assert qb.to_sql() == "SELECT * FROM t GROUP BY a,b,c"

    def test_order_multiple_columns(self):
        """Test that order() appends and defaults to ASC."""
        qb = QueryBuilder().select("t").order("a").order("b", "DESC")
        assert qb.to_sql() == "SELECT * FROM t ORDER BY a ASC,b DESC"

    def test_order_rejects_unknown_direction(self):
        """Test that order direction is validated."""
        with pytest.raises(InvalidArgumentError):
            QueryBuilder().select("t").order("a", "SIDEWAYS")

    def test_limit_overwrites(self):
        """Test that a second limit() replaces the first."""
        qb = QueryBuilder().select("t").limit(5).limit(20)
        assert qb.to_sql() == "SELECT * FROM t LIMIT 20"

    @pytest.mark.parametrize("bad", [-1, "10", 1.5, True])
    def test_limit_rejects_invalid(self, bad):
        """Test that limit needs a non-negative integer."""
        with pytest.raises(InvalidArgumentError):
            QueryBuilder().select("t").limit(bad)

    def test_delete_with_where(self):
        """Test DELETE with a condition."""
        qb = QueryBuilder().delete("sessions").where("expires_at", "<", "2024-01-01")
        assert qb.to_sql() == "DELETE FROM sessions WHERE expires_at < ?"
        assert qb.values == ["2024-01-01"]


class TestOperatorsInBuilder:
    """Test operators that contribute several values or subqueries."""

    def test_in_placeholders_match_values(self):
        """Test that IN renders one placeholder per element."""
        qb = QueryBuilder().select("users").where("id", Operator.IN, [1, 2, 3])
        sql = qb.to_sql()
        assert sql == "SELECT * FROM users WHERE id IN (?,?,?)"
        assert qb.values == [1, 2, 3]
        assert sql.count("?") == len(qb.values)

    @pytest.mark.parametrize("bad", [[], 5, "abc", {"a": 1}])
    def test_in_rejects_empty_or_non_sequence(self, bad):
        """Test that IN needs a non-empty sequence."""
        with pytest.raises(InvalidArgumentError):
            QueryBuilder().select("users").where("id", "IN", bad)

    def test_between(self):
        """Test that BETWEEN consumes both bounds in order."""
        qb = QueryBuilder().select("users").where("age", "BETWEEN", (18, 65))
        assert qb.to_sql() == "SELECT * FROM users WHERE age BETWEEN ? AND ?"
        assert qb.values == [18, 65]

    def test_exists_uses_subquery_values(self):
        """Test that EXISTS embeds the subquery and takes over its values."""
        sub = QueryBuilder().select("orders", ["1"]).where("orders.total", ">", 100)
        qb = (
            QueryBuilder()
            .select("users")
            .where("active", "=", True)
            .where("", Operator.EXISTS, sub)
        )
        assert qb.to_sql() == (
            "SELECT * FROM users WHERE active = ? AND "
            "EXISTS (SELECT 1 FROM orders WHERE orders.total > ?)"
        )
        assert qb.values == [True, 100]

    def test_exists_rejects_non_builder(self):
        """Test that EXISTS needs a QueryBuilder."""
        with pytest.raises(InvalidArgumentError):
            QueryBuilder().select("users").where("", "EXISTS", "SELECT 1")

    def test_operator_keyword_case_insensitive(self):
        """Test that keyword operators can be given in lowercase."""
        qb = QueryBuilder().select("users").where("name", "like", "%bo%")
        assert qb.to_sql() == "SELECT * FROM users WHERE name LIKE ?"


class TestBuilderState:
    """Test builder lifecycle rules."""

    def test_rendering_is_idempotent(self):
        """Test that rendering twice yields the same text and values."""
        qb = QueryBuilder().update("users", {"age": 31}).where("id", "=", 5).where("x", "IN", [1])
        first = qb.to_sql()
        values = list(qb.values)
        assert qb.to_sql() == first
        assert str(qb) == first
        assert qb.values == values

    def test_reshaping_is_forbidden(self):
        """Test that a second shaping call on the same builder fails."""
        qb = QueryBuilder().select("users")
        with pytest.raises(IllegalStateError):
            qb.delete("users")
        assert qb.to_sql() == "SELECT * FROM users"

    def test_reset_allows_reuse(self):
        """Test that reset() clears statement, clauses and values."""
        qb = QueryBuilder().update("users", {"age": 31}).where("id", "=", 5).limit(1)
        qb.reset()
        assert qb.kind is None
        assert qb.values == []
        assert qb.delete("users").to_sql() == "DELETE FROM users"

    def test_params_is_tuple_copy(self):
        """Test that params is an immutable snapshot of the values."""
        qb = QueryBuilder().insert("users", {"name": "Bo"})
        assert qb.params == ("Bo",)

    def test_execute_unbound_raises(self):
        """Test that execute() needs a backend."""
        with pytest.raises(IllegalStateError, match="not bound"):
            QueryBuilder().select("users").execute()
