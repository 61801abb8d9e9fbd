"""Declarative filters for query reports."""

from query_report.filtering import FilterDefinition, FilterRegistry, FilterType


__all__ = ["FilterDefinition", "FilterRegistry", "FilterType"]
