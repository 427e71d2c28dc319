"""
Shared pytest fixtures for wp-query-builder tests.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from wp_query_builder.builder import (
    CompareBuilder, MetaCompareBuilder, OperatorResolver,
    RelationBuilder, TaxCompareBuilder, WpQueryArgsBuilder
)
from wp_query_builder.config import BuilderConfig
from wp_query_builder.parser import FilterParser

logging.basicConfig(level=logging.CRITICAL)


@pytest.fixture
def resolver():
    """Provide an operator resolver."""
    return OperatorResolver()


@pytest.fixture
def compare_builder():
    return CompareBuilder()


@pytest.fixture
def meta_builder():
    return MetaCompareBuilder()


@pytest.fixture
def tax_builder():
    return TaxCompareBuilder()


@pytest.fixture
def relation_builder():
    return RelationBuilder()


@pytest.fixture
def builder():
    """Provide a WP_Query args builder with default settings."""
    return WpQueryArgsBuilder()


@pytest.fixture
def explicit_config():
    """Settings that keep default operators in the output."""
    return BuilderConfig(explicit_defaults=True)


@pytest.fixture
def parser():
    return FilterParser()
