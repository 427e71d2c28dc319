#!/usr/bin/env python3
"""
Tests for meta and taxonomy relation blocks.
"""

import pytest

from wp_query_builder.builder import RelationBuilder, RelationMode
from wp_query_builder.exceptions import UnsupportedExpressionError, UnsupportedOperatorError
from wp_query_builder.expressions import Expression, and_, compare, lit, meta, or_, tax, var


class TestMetaRelation:
    """Test relation blocks in meta mode."""

    def test_or_block(self, relation_builder):
        """Test an OR group of meta compares."""
        expression = or_(
            compare(">=", meta("price"), lit(10)),
            compare("exists", meta("featured")),
        )
        block = relation_builder.build(expression, RelationMode.META)

        assert block == {
            "relation": "OR",
            0: {"key": "price", "value": 10, "type": "NUMERIC", "compare": ">="},
            1: {"key": "featured", "compare": "EXISTS"},
        }

    def test_relation_first_then_input_order(self, relation_builder):
        """Test children keep the order of the expression terms."""
        expression = and_(
            compare("=", meta("c"), lit("3")),
            compare("=", meta("a"), lit("1")),
            compare("=", meta("b"), lit("2")),
        )
        block = relation_builder.build(expression, RelationMode.META)

        assert list(block) == ["relation", 0, 1, 2]
        assert [block[i]["key"] for i in range(3)] == ["c", "a", "b"]

    def test_nested(self, relation_builder):
        """Test logical children become nested blocks in the same mode."""
        expression = and_(
            compare("=", meta("color"), lit("red")),
            or_(
                compare("<", meta("price"), lit(5)),
                compare("=", meta("sale"), lit(True)),
            ),
        )
        block = relation_builder.build(expression, RelationMode.META)

        assert block["relation"] == "AND"
        assert block[1]["relation"] == "OR"
        assert block[1][0]["key"] == "price"
        assert block[1][1] == {"key": "sale", "value": True, "type": "BINARY"}

    def test_empty(self, relation_builder):
        """Test an empty group gives only the relation."""
        assert relation_builder.build(and_(), RelationMode.META) == {"relation": "AND"}

    def test_default_mode_is_meta(self, relation_builder):
        """Test meta mode is the default."""
        block = relation_builder.build(and_(compare("=", meta("color"), lit("red"))))
        assert block[0]["key"] == "color"


class TestTaxRelation:
    """Test relation blocks in taxonomy mode."""

    def test_negated_membership(self, relation_builder):
        """Test negated equality becomes NOT IN."""
        expression = and_(compare("=", tax("category"), lit("news"), negated=True))
        block = relation_builder.build(expression, RelationMode.TAX)

        assert block == {
            "relation": "AND",
            0: {"taxonomy": "category", "field": "slug", "terms": ["news"], "operator": "NOT IN"},
        }

    def test_mode_string(self, relation_builder):
        """Test the mode can be given as a string."""
        expression = or_(compare("in", tax("post_tag"), lit([1, 2])))
        block = relation_builder.build(expression, "tax")
        assert block[0]["field"] == "term_id"

    def test_meta_terms_rejected(self, relation_builder):
        """Test meta comparisons do not fit a taxonomy relation."""
        result = relation_builder.attempt(and_(compare("=", meta("color"), lit("red"))), RelationMode.TAX)
        assert not result.ok


class TestRelationFailures:
    """Test that a failing term fails the whole relation."""

    def test_bad_term_fails_whole_relation(self, relation_builder):
        """Test one bad term fails the whole block."""
        bad = compare("=", var("post_type"), lit("post"))
        expression = and_(
            compare("=", meta("color"), lit("red")),
            bad,
        )
        result = relation_builder.attempt(expression, RelationMode.META)

        assert not result.ok
        assert result.value is None
        assert isinstance(result.error, UnsupportedExpressionError)
        # The relation is the rejected unit; the child failure is the cause
        assert result.error.subject is expression
        assert result.error.__cause__.subject is bad

    def test_nested_failure_propagates(self, relation_builder):
        """Test a nested failure fails the outer group."""
        expression = and_(or_(compare("like", tax("category"), lit("n%"))))
        with pytest.raises(UnsupportedExpressionError) as exc_info:
            relation_builder.build(expression, RelationMode.TAX)
        assert exc_info.value.subject is expression

    def test_negated_relation(self, relation_builder):
        """Test negated groups are rejected."""
        expression = and_(compare("=", meta("color"), lit("red")), negated=True)
        result = relation_builder.attempt(expression, RelationMode.META)
        assert not result.ok
        assert isinstance(result.error.__cause__, UnsupportedOperatorError)

    def test_relational_expression(self, relation_builder):
        """Test a single comparison is not a relation."""
        result = relation_builder.attempt(compare("=", meta("color"), lit("red")), RelationMode.META)
        assert not result.ok
        assert isinstance(result.error.__cause__, UnsupportedOperatorError)

    def test_unknown_boolean_type(self, relation_builder):
        """Test unknown boolean types are rejected."""
        result = relation_builder.attempt(Expression("xor", ()), RelationMode.META)
        assert not result.ok

    def test_non_expression_term(self, relation_builder):
        """Test non-expression terms are rejected."""
        expression = and_(lit("red"))
        result = relation_builder.attempt(expression, RelationMode.META)
        assert not result.ok
        assert result.error.__cause__.subject == lit("red")

    def test_unknown_mode(self, relation_builder):
        """Test unknown modes raise ValueError."""
        with pytest.raises(ValueError):
            relation_builder.attempt(and_(), "post")
