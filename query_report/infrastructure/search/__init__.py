"""Search backends interpreting ``"{column}_{predicate}"`` condition keys."""

from query_report.infrastructure.search.sqlalchemy_search import (
    PREDICATES,
    Condition,
    SearchResult,
    SqlAlchemySearch,
)


__all__ = [
    "PREDICATES",
    "Condition",
    "SearchResult",
    "SqlAlchemySearch",
]
