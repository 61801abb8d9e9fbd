"""Generic search over SQLAlchemy select statements.

Conditions are keyed ``"{attribute}_{predicate}"`` and applied to the entity
being selected:

    search = SqlAlchemySearch().search(
        select(Order),
        {"created_at_gteq": "2020-01-01", "name_cont": "widget"},
    )
    search.result  # select(Order).where(created_at >= ..., name LIKE '%widget%')

Blank values are skipped. Keys naming an unknown attribute or predicate, and
values that cannot be cast to the column type, are ignored with a warning so
request data never breaks a report.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import Select, and_, func, inspect
from sqlalchemy.types import Boolean, Date, DateTime, Float, Integer, Numeric, String

from query_report.domain.exceptions import SearchBackendError
from query_report.domain.interfaces import ISearchBackend
from query_report.infrastructure.logging import get_logger
from query_report.utils.presence import is_blank


logger = get_logger(__name__)

TRUE_VALUES = frozenset({"1", "t", "true", "y", "yes", "on"})
FALSE_VALUES = frozenset({"0", "f", "false", "n", "no", "off"})


class _UncastableValue(Exception):
    """Raised internally when a request value does not fit the column type."""


# ============================================================================
# Predicates
# ============================================================================


def _like_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _blank(column: Any) -> Any:
    # Only text columns can hold an empty string
    if isinstance(column.type, String):
        return column.is_(None) | (column == "")
    return column.is_(None)


def _present(column: Any) -> Any:
    if isinstance(column.type, String):
        return and_(column.is_not(None), column != "")
    return column.is_not(None)


# predicate -> (expression builder, casts value to column type)
PREDICATES: dict[str, tuple[Callable[[Any, Any], Any], bool]] = {
    "eq": (lambda column, value: column == value, True),
    "not_eq": (lambda column, value: column != value, True),
    "lt": (lambda column, value: column < value, True),
    "lteq": (lambda column, value: column <= value, True),
    "gt": (lambda column, value: column > value, True),
    "gteq": (lambda column, value: column >= value, True),
    "cont": (
        lambda column, value: column.like(f"%{_like_escape(str(value))}%", escape="\\"),
        False,
    ),
    "not_cont": (
        lambda column, value: ~column.like(f"%{_like_escape(str(value))}%", escape="\\"),
        False,
    ),
    "i_cont": (
        lambda column, value: func.lower(column).like(
            f"%{_like_escape(str(value).lower())}%", escape="\\"
        ),
        False,
    ),
    "start": (
        lambda column, value: column.like(f"{_like_escape(str(value))}%", escape="\\"),
        False,
    ),
    "end": (
        lambda column, value: column.like(f"%{_like_escape(str(value))}", escape="\\"),
        False,
    ),
    "in": (lambda column, value: column.in_(value), True),
    "not_in": (lambda column, value: column.not_in(value), True),
    "null": (lambda column, value: column.is_(None) if value else column.is_not(None), False),
    "not_null": (lambda column, value: column.is_not(None) if value else column.is_(None), False),
    "present": (lambda column, value: _present(column) if value else _blank(column), False),
    "blank": (lambda column, value: _blank(column) if value else _present(column), False),
    "true": (lambda column, value: column.is_(True) if value else column.is_not(True), False),
    "false": (lambda column, value: column.is_(False) if value else column.is_not(False), False),
}

# Predicates whose request value is a flag rather than an operand
FLAG_PREDICATES = frozenset({"null", "not_null", "present", "blank", "true", "false"})
LIST_PREDICATES = frozenset({"in", "not_in"})

# Longest first so "not_eq" wins over "eq" and "not_null" over "null"
_PREDICATE_SUFFIXES = sorted(PREDICATES, key=len, reverse=True)


@dataclass(frozen=True)
class Condition:
    """One search key resolved to an attribute, a predicate and a cast value."""

    attribute: str
    predicate: str
    value: Any


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one generic search.

    Attributes:
        conditions: Bucket received from the request
        applied: Conditions that became clauses of the query
        ignored: Keys that were skipped (blank, unknown or uncastable)
        result: The narrowed query
    """

    conditions: Mapping[str, Any]
    result: Any
    applied: tuple[Condition, ...] = field(default_factory=tuple)
    ignored: tuple[str, ...] = field(default_factory=tuple)


# ============================================================================
# Search Backend
# ============================================================================


class SqlAlchemySearch(ISearchBackend):
    """Search backend building ``WHERE`` clauses on a ``sqlalchemy.Select``."""

    def __init__(self, model: type | None = None) -> None:
        """Initialize the backend.

        Args:
            model: Mapped class searched on; defaults to the first entity
                of each searched select statement
        """
        self.model = model

    def search(self, query: Select, conditions: Mapping[str, Any]) -> SearchResult:  # type: ignore[override]
        """Apply every condition in the bucket to the select statement."""
        conditions = dict(conditions or {})
        model = self.model or self._entity_of(query)

        applied: list[Condition] = []
        ignored: list[str] = []
        expressions = []
        for key, raw_value in conditions.items():
            if is_blank(raw_value):
                ignored.append(key)
                continue

            parsed = self._parse_key(model, key)
            if parsed is None:
                logger.warning("search_condition_unknown", key=key, model=model.__name__)
                ignored.append(key)
                continue

            attribute, predicate = parsed
            column = getattr(model, attribute)
            try:
                value = self._prepare_value(column, predicate, raw_value)
            except _UncastableValue:
                logger.warning("search_condition_uncastable", key=key, model=model.__name__)
                ignored.append(key)
                continue

            build, _ = PREDICATES[predicate]
            expressions.append(build(column, value))
            applied.append(Condition(attribute=attribute, predicate=predicate, value=value))

        if expressions:
            query = query.where(and_(*expressions))

        logger.debug(
            "search_applied",
            model=model.__name__,
            applied=[f"{c.attribute}_{c.predicate}" for c in applied],
            ignored=ignored,
        )
        return SearchResult(
            conditions=conditions,
            result=query,
            applied=tuple(applied),
            ignored=tuple(ignored),
        )

    # ------------------------------------------------------------------------
    # Key parsing
    # ------------------------------------------------------------------------

    @staticmethod
    def _entity_of(query: Any) -> type:
        descriptions = getattr(query, "column_descriptions", None) or []
        for description in descriptions:
            entity = description.get("entity")
            if entity is not None:
                return entity
        raise SearchBackendError(
            "Cannot determine the entity to search on; pass a model to SqlAlchemySearch",
            details={"query_type": type(query).__name__},
        )

    @staticmethod
    def _parse_key(model: type, key: str) -> tuple[str, str] | None:
        attributes = set(inspect(model).columns.keys())
        for predicate in _PREDICATE_SUFFIXES:
            suffix = f"_{predicate}"
            if key.endswith(suffix) and key[: -len(suffix)] in attributes:
                return key[: -len(suffix)], predicate
        return None

    # ------------------------------------------------------------------------
    # Value casting
    # ------------------------------------------------------------------------

    def _prepare_value(self, column: Any, predicate: str, value: Any) -> Any:
        if predicate in FLAG_PREDICATES:
            return self._cast_boolean(value)

        if predicate in LIST_PREDICATES:
            if isinstance(value, str):
                items = [item.strip() for item in value.split(",")]
            elif isinstance(value, list | tuple | set | frozenset):
                items = list(value)
            else:
                items = [value]
            values = [self._cast(column, item) for item in items if not is_blank(item)]
            if not values:
                raise _UncastableValue(value)
            return values

        _, casts = PREDICATES[predicate]
        return self._cast(column, value) if casts else self._scalar(value)

    @staticmethod
    def _scalar(value: Any) -> Any:
        # q[status_eq][]=a arrives as a list; only in/not_in take several values
        if isinstance(value, Mapping | list | tuple | set | frozenset):
            raise _UncastableValue(value)
        return value

    def _cast(self, column: Any, value: Any) -> Any:
        if not isinstance(value, str):
            return self._scalar(value)

        column_type = column.type
        text = value.strip()
        try:
            if isinstance(column_type, Boolean):
                return self._cast_boolean(text)
            if isinstance(column_type, DateTime):
                return datetime.fromisoformat(text)
            if isinstance(column_type, Date):
                return date.fromisoformat(text[:10])
            if isinstance(column_type, Integer):
                return int(text)
            if isinstance(column_type, Float):
                return float(text)
            if isinstance(column_type, Numeric):
                return Decimal(text)
        except (ValueError, InvalidOperation) as e:
            raise _UncastableValue(text) from e
        return value

    @staticmethod
    def _cast_boolean(value: Any) -> bool:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        raise _UncastableValue(text)
