"""Declarative report filters and the registry applying them."""

from query_report.filtering.definition import (
    FilterDefinition,
    FilterOptions,
    FilterType,
    OneValuePredicate,
    Predicate,
    TwoValuePredicate,
)
from query_report.filtering.registry import FilterRegistry


__all__ = [
    "FilterDefinition",
    "FilterOptions",
    "FilterRegistry",
    "FilterType",
    "OneValuePredicate",
    "Predicate",
    "TwoValuePredicate",
]
