"""Filter definitions: one column, its comparators and an optional predicate.

Example:
    created = FilterDefinition("created_at", "date")
    created.search_keys       # ("created_at_gteq", "created_at_lteq")
    created.comparators       # {"gteq": "From", "lteq": "To"}

    status = FilterDefinition(
        "status",
        {"comp": {"eq": "Status"}},
        lambda query, value: query.where(Order.status == value),
    )
    status.custom             # True
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from query_report.domain.exceptions import FilterConfigurationError
from query_report.domain.interfaces import ILocalizer
from query_report.infrastructure.config import get_settings
from query_report.infrastructure.i18n import CatalogLocalizer
from query_report.infrastructure.logging import get_logger
from query_report.utils.presence import is_blank


logger = get_logger(__name__)


class FilterType(str, Enum):
    """Filter types with built-in comparator defaults."""

    DATE = "date"
    TEXT = "text"
    BOOLEAN = "boolean"


# ============================================================================
# Predicate Variants
# ============================================================================


@dataclass(frozen=True)
class OneValuePredicate:
    """Custom predicate for a single-comparator filter: ``fn(query, value)``."""

    fn: Callable[[Any, Any], Any]


@dataclass(frozen=True)
class TwoValuePredicate:
    """Custom predicate for a two-comparator filter: ``fn(query, first, last)``."""

    fn: Callable[[Any, Any, Any], Any]


Predicate = OneValuePredicate | TwoValuePredicate


# ============================================================================
# Options
# ============================================================================


class FilterOptions(BaseModel):
    """Recognized filter options.

    Attributes:
        type: Type tag; ``date``, ``text`` and ``boolean`` are understood
        comp: Ordered comparator-id to label mapping. A list of comparator ids
            is accepted too, labels are then looked up per column.
        default: Default value, or one default per comparator
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str | None = None
    comp: dict[str, str | None] | None = None
    default: Any = None

    @field_validator("type", mode="before")
    @classmethod
    def coerce_type(cls, v: Any) -> Any:
        """Accept FilterType members as well as plain tags."""
        if isinstance(v, Enum):
            return v.value
        return v

    @field_validator("comp", mode="before")
    @classmethod
    def coerce_comparators(cls, v: Any) -> Any:
        """Turn a list of comparator ids into a mapping without labels."""
        if isinstance(v, list | tuple):
            return {str(comparator): None for comparator in v}
        return v


# ============================================================================
# Filter Definition
# ============================================================================


class FilterDefinition:
    """Immutable description of one column's filter.

    A filter is custom when it carries a predicate. Custom filters read their
    values from the custom-search bucket and run the predicate themselves;
    the other filters only declare search keys for the search backend.
    """

    __slots__ = (
        "_column",
        "_options",
        "_type",
        "_comparators",
        "_callback",
        "_predicate",
        "_search_keys",
    )

    def __init__(
        self,
        column: str,
        options: FilterOptions | Mapping[str, Any] | str | None = None,
        predicate: Callable[..., Any] | None = None,
        *,
        localizer: ILocalizer | None = None,
        label_scope: str | None = None,
    ) -> None:
        """Build a filter definition.

        Args:
            column: Column (attribute) the filter applies to
            options: Type tag string, or a mapping with ``type``, ``comp``
                and ``default`` keys
            predicate: Optional custom predicate making the filter custom
            localizer: Label resolver, defaults to the built-in catalogs in
                the configured locale
            label_scope: Translation key prefix for comparator labels,
                defaults to the configured label scope

        Raises:
            FilterConfigurationError: If the column is blank, the options are
                malformed or the predicate is not callable
        """
        if not isinstance(column, str) or not column.strip():
            raise FilterConfigurationError("Filter column must be a non-blank string")
        if predicate is not None and not callable(predicate):
            raise FilterConfigurationError(
                f"Predicate for filter '{column}' must be callable",
                details={"column": column},
            )

        self._column = column
        self._options = self._parse_options(column, options)
        self._type = self._normalize_type(self._options.type)

        if localizer is None or label_scope is None:
            settings = get_settings()
            localizer = localizer or CatalogLocalizer(
                locale=settings.locale, default_locale=settings.default_locale
            )
            label_scope = label_scope or settings.label_scope
        comparators = self._options.comp or self._detect_comparators(localizer, label_scope)
        self._comparators = MappingProxyType(
            {
                comparator: label
                if label is not None
                else localizer.translate(f"{label_scope}.{column}.{comparator}")
                for comparator, label in comparators.items()
            }
        )
        self._search_keys = tuple(f"{column}_{comparator}" for comparator in self._comparators)
        self._callback = predicate
        self._predicate = self._wrap_predicate(predicate)

    @staticmethod
    def supported_types() -> tuple[FilterType, ...]:
        """Type tags that have built-in comparator defaults."""
        return tuple(FilterType)

    @property
    def column(self) -> str:
        return self._column

    @property
    def options(self) -> FilterOptions:
        return self._options

    @property
    def type(self) -> FilterType | str | None:
        return self._type

    @property
    def comparators(self) -> Mapping[str, str]:
        """Read-only comparator-id to label mapping, in declaration order."""
        return self._comparators

    @property
    def search_keys(self) -> tuple[str, ...]:
        """Request parameter keys, one ``"{column}_{comparator}"`` per comparator."""
        return self._search_keys

    @property
    def predicate(self) -> Predicate | None:
        """Predicate variant chosen from the comparator count, if any."""
        return self._predicate

    @property
    def custom(self) -> bool:
        return self._callback is not None

    @property
    def defaults(self) -> list[Any]:
        """Configured defaults, one per comparator position.

        A scalar default becomes a one-element list; a blank default means
        no defaults at all.
        """
        default = self._options.default
        if is_blank(default):
            return []
        if isinstance(default, list | tuple):
            return list(default)
        return [default]

    def is_type(self, candidate: FilterType | str) -> bool:
        return self._type == self._normalize_type(candidate)

    @property
    def is_date(self) -> bool:
        return self.is_type(FilterType.DATE)

    @property
    def is_text(self) -> bool:
        return self.is_type(FilterType.TEXT)

    @property
    def is_boolean(self) -> bool:
        return self.is_type(FilterType.BOOLEAN)

    def __repr__(self) -> str:
        return (
            f"FilterDefinition(column={self._column!r}, type={self._type!r}, "
            f"comparators={list(self._comparators)!r}, custom={self.custom})"
        )

    # ------------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------------

    @staticmethod
    def _parse_options(column: str, options: Any) -> FilterOptions:
        if options is None:
            return FilterOptions()
        if isinstance(options, FilterOptions):
            return options
        if isinstance(options, FilterType):
            return FilterOptions(type=options.value)
        if isinstance(options, str):
            return FilterOptions(type=options)
        if isinstance(options, Mapping):
            try:
                return FilterOptions.model_validate(dict(options))
            except ValidationError as e:
                raise FilterConfigurationError(
                    f"Invalid options for filter '{column}'",
                    details=e.errors(include_url=False),
                ) from e
        raise FilterConfigurationError(
            f"Options for filter '{column}' must be a type string or a mapping",
            details={"column": column, "options_type": type(options).__name__},
        )

    @staticmethod
    def _normalize_type(value: Any) -> FilterType | str | None:
        if isinstance(value, FilterType):
            return value
        try:
            return FilterType(value)
        except ValueError:
            return value

    def _detect_comparators(self, localizer: ILocalizer, scope: str) -> dict[str, str]:
        if self._type == FilterType.DATE:
            return {
                "gteq": localizer.translate(f"{scope}.from"),
                "lteq": localizer.translate(f"{scope}.to"),
            }
        if self._type == FilterType.TEXT:
            return {"cont": localizer.translate(f"{scope}.{self._column}.contains")}
        return {"eq": localizer.translate(f"{scope}.{self._column}.equals")}

    def _wrap_predicate(self, predicate: Callable[..., Any] | None) -> Predicate | None:
        if predicate is None:
            return None
        if len(self._comparators) == 1:
            return OneValuePredicate(predicate)
        if len(self._comparators) == 2:
            return TwoValuePredicate(predicate)

        # Custom pass skips filters without a one- or two-value predicate
        logger.warning(
            "custom_filter_never_applied",
            column=self._column,
            comparator_count=len(self._comparators),
        )
        return None
