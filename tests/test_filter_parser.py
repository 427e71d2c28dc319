#!/usr/bin/env python3
"""
Tests for the MongoDB-style filter parser.
"""

import pytest

from wp_query_builder import WpQueryArgsBuilder
from wp_query_builder.config import BuilderConfig
from wp_query_builder.exceptions import InvalidFilterError
from wp_query_builder.expressions import (
    BooleanType, EntityFieldTerm, Expression, LiteralTerm, RelationalType, VariableTerm
)
from wp_query_builder.parser import FilterParser


class TestFilterParser:
    """Test parsing filter dicts into expressions."""

    def test_empty_filter(self, parser):
        """Test parsing empty filter."""
        expr = parser.parse({})
        assert expr.type == BooleanType.AND
        assert expr.terms == ()

    def test_simple_equality(self, parser):
        """Test simple variable equality."""
        expr = parser.parse({"post_type": "post"})

        assert expr.type == BooleanType.AND
        assert len(expr.terms) == 1
        cond = expr.terms[0]
        assert isinstance(cond, Expression)
        assert cond.type == RelationalType.EQUAL_TO
        assert cond.terms == (VariableTerm("post_type"), LiteralTerm("post"))

    def test_entity_fields(self, parser):
        """Test meta and taxonomy prefixes become entity fields."""
        expr = parser.parse({"$and": [{"meta.price": 5}, {"tax.category": "news"}]})

        group = expr.terms[0]
        assert group.type == BooleanType.AND
        assert group.terms[0].terms[0] == EntityFieldTerm("meta", "price")
        assert group.terms[1].terms[0] == EntityFieldTerm("tax", "category")

    def test_unknown_prefix_is_variable(self, parser):
        """Test unknown prefixes stay plain variables."""
        expr = parser.parse({"date.year": 2024})
        assert expr.terms[0].terms[0] == VariableTerm("date.year")

    def test_comparison_operators(self, parser):
        """Test several operators on one field."""
        expr = parser.parse({"$and": [{"meta.price": {"$gte": 5, "$lt": 10}}]})

        group = expr.terms[0].terms[0]
        assert group.type == BooleanType.AND
        ops = {cond.type for cond in group.terms}
        assert ops == {RelationalType.GREATER_EQUAL_TO, RelationalType.LESS_THAN}

    def test_logical_or(self, parser):
        """Test $or children are the conditions themselves."""
        expr = parser.parse({"$or": [{"meta.a": 1}, {"meta.b": 2}]})

        group = expr.terms[0]
        assert group.type == BooleanType.OR
        assert all(not t.is_logical() for t in group.terms)

    def test_field_not(self, parser):
        """Test field-level $not negates the condition."""
        expr = parser.parse({"$and": [{"tax.category": {"$not": {"$eq": "news"}}}]})
        cond = expr.terms[0].terms[0]
        assert cond.type == RelationalType.EQUAL_TO
        assert cond.negated is True

    def test_top_level_not(self, parser):
        """Test top-level $not negates its condition."""
        expr = parser.parse({"$not": {"post_type": "page"}})
        assert expr.terms[0].negated is True

    def test_not_single_wrapper_pushes_down(self, parser):
        """Test negating a one-term group negates the term instead."""
        expr = parser.parse({"$not": {"$and": [{"meta.a": 1}]}})
        group = expr.terms[0]
        assert group.negated is False
        assert group.terms[0].negated is True

    def test_exists_false(self, parser):
        """Test $exists false is a negated existence check."""
        expr = parser.parse({"$and": [{"meta.featured": {"$exists": False}}]})
        cond = expr.terms[0].terms[0]
        assert cond.type == RelationalType.EXISTS
        assert cond.negated is True
        assert cond.terms == (EntityFieldTerm("meta", "featured"),)

    def test_custom_entities(self):
        """Test entity prefixes come from config."""
        parser = FilterParser(config=BuilderConfig(meta_entity="cf", tax_entity="terms"))
        expr = parser.parse({"cf.color": "red", "terms.genre": "jazz", "meta.x": 1})
        fields = [cond.terms[0] for cond in expr.terms]
        assert fields == [
            EntityFieldTerm("cf", "color"),
            EntityFieldTerm("terms", "genre"),
            VariableTerm("meta.x"),
        ]


class TestFilterParserErrors:
    """Test malformed filters are rejected."""

    def test_unknown_operator(self, parser):
        """Test unknown operators are rejected."""
        with pytest.raises(InvalidFilterError):
            parser.parse({"price": {"$near": 5}})

    def test_operator_without_field(self, parser):
        """Test field operators need a field."""
        with pytest.raises(InvalidFilterError):
            parser.parse({"$gt": 5})

    def test_logical_requires_list(self, parser):
        """Test $and and $or need a list."""
        with pytest.raises(InvalidFilterError):
            parser.parse({"$and": {"a": 1}})

    def test_logical_items_must_be_dicts(self, parser):
        """Test $and and $or items must be dicts."""
        with pytest.raises(InvalidFilterError):
            parser.parse({"$or": ["a"]})

    def test_not_requires_dict(self, parser):
        """Test $not needs a dict."""
        with pytest.raises(InvalidFilterError):
            parser.parse({"$not": ["a"]})

    def test_is_value_error(self, parser):
        """Test parse errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            parser.parse({"$bogus": 1})

    def test_max_depth(self):
        """Test nested groups beyond the limit are rejected."""
        parser = FilterParser(max_depth=3)
        filters = {"a": 1}
        for _ in range(5):
            filters = {"$and": [filters]}
        with pytest.raises(InvalidFilterError):
            parser.parse(filters)

    def test_depth_reset_after_error(self):
        """Test the depth counter resets between parses."""
        parser = FilterParser(max_depth=3)
        with pytest.raises(InvalidFilterError):
            parser.parse({"$and": [{"$and": [{"$and": [{"$and": [{"a": 1}]}]}]}]})
        assert parser.parse({"$and": [{"a": 1}]}).type == BooleanType.AND

    def test_max_depth_field_not(self):
        """Test nested field-level $not counts towards the depth limit."""
        parser = FilterParser(max_depth=10)
        condition = {"$eq": 1}
        for _ in range(5000):
            condition = {"$not": condition}
        with pytest.raises(InvalidFilterError):
            parser.parse({"meta.x": condition})

    def test_field_not_within_depth(self):
        """Test a shallow field-level $not still parses after the limit is hit."""
        parser = FilterParser(max_depth=3)
        with pytest.raises(InvalidFilterError):
            parser.parse({"meta.x": {"$not": {"$not": {"$not": {"$eq": 1}}}}})

        expr = parser.parse({"meta.x": {"$not": {"$eq": 1}}})
        assert expr.terms[0].negated is True


class TestParseAndBuild:
    """Test parsed filters build into WP_Query arguments."""

    def test_end_to_end(self, parser):
        """Test a parsed filter builds into WP_Query arguments."""
        expr = parser.parse({
            "post_type": "product",
            "$or": [
                {"meta.price": {"$lt": 10}},
                {"meta.on_sale": True}
            ],
            "$and": [
                {"tax.product_cat": {"$in": ["shoes", "boots"]}}
            ]
        })

        assert WpQueryArgsBuilder().build(expr) == {
            "post_type": "product",
            "meta_query": {
                "relation": "OR",
                0: {"key": "price", "value": 10, "type": "NUMERIC", "compare": "<"},
                1: {"key": "on_sale", "value": True, "type": "BINARY"},
            },
            "tax_query": {
                "relation": "AND",
                0: {"taxonomy": "product_cat", "field": "slug", "terms": ["shoes", "boots"]},
            },
        }
