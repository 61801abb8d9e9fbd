"""Per-report filter registry translating request parameters into a query.

Example:
    registry = FilterRegistry()
    registry.register("created_at", {"type": "date", "default": ["2020-01-01", "2020-12-31"]})
    registry.register("name", "text")

    @registry.custom("status", {"comp": {"eq": "Status"}})
    def by_status(query, value):
        return query.where(Order.status == value)

    query = registry.apply_filters(select(Order), request_params)

Request parameters carry two buckets: ``q`` holds generic search conditions
handled in one call by the search backend, ``custom_search`` holds the values
read by custom filters.
"""

from collections.abc import Callable, Mapping
from typing import Any

from query_report.domain.interfaces import ILocalizer, ISearchBackend, ISearchResult
from query_report.filtering.definition import (
    FilterDefinition,
    FilterOptions,
    OneValuePredicate,
    TwoValuePredicate,
)
from query_report.infrastructure.config import CustomFilterPolicy, Settings, get_settings
from query_report.infrastructure.i18n import CatalogLocalizer
from query_report.infrastructure.logging import get_logger
from query_report.infrastructure.search import SqlAlchemySearch
from query_report.utils.presence import is_present


logger = get_logger(__name__)


class FilterRegistry:
    """Ordered filters of one report plus the last generic search.

    Create one registry per report instance. ``last_search_result`` belongs
    to the most recent ``apply_filters`` call, so a registry must not be
    shared between concurrent requests.
    """

    def __init__(
        self,
        *,
        search_backend: ISearchBackend | None = None,
        localizer: ILocalizer | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize an empty registry.

        Args:
            search_backend: Backend for the generic search bucket,
                defaults to :class:`SqlAlchemySearch`
            localizer: Comparator label resolver, defaults to the built-in
                catalogs in the configured locale
            settings: Configuration, defaults to :func:`get_settings`
        """
        self.settings = settings or get_settings()
        self.search_backend = search_backend or SqlAlchemySearch()
        self.localizer = localizer or CatalogLocalizer(
            locale=self.settings.locale,
            default_locale=self.settings.default_locale,
        )
        self._filters: list[FilterDefinition] = []
        self._last_search_result: ISearchResult | None = None

    @property
    def filters(self) -> tuple[FilterDefinition, ...]:
        """Registered filters in registration order."""
        return tuple(self._filters)

    @property
    def last_search_result(self) -> ISearchResult | None:
        """Search object of the most recent ``apply_filters`` call."""
        return self._last_search_result

    @property
    def search(self) -> ISearchResult | None:
        """Alias of :attr:`last_search_result`."""
        return self._last_search_result

    def register(
        self,
        column: str,
        options: FilterOptions | Mapping[str, Any] | str | None = None,
        predicate: Callable[..., Any] | None = None,
    ) -> FilterDefinition:
        """Create a filter and append it to the registry.

        Registering the same column twice keeps both filters.

        Args:
            column: Column the filter applies to
            options: Type tag, or mapping with ``type``, ``comp`` and ``default``
            predicate: Custom predicate ``(query, value)`` or
                ``(query, first, last)``; makes the filter custom

        Returns:
            The created filter definition
        """
        definition = FilterDefinition(
            column,
            options,
            predicate,
            localizer=self.localizer,
            label_scope=self.settings.label_scope,
        )
        self._filters.append(definition)
        logger.debug(
            "filter_registered",
            column=definition.column,
            search_keys=list(definition.search_keys),
            custom=definition.custom,
        )
        return definition

    def custom(
        self,
        column: str,
        options: FilterOptions | Mapping[str, Any] | str | None = None,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register the decorated function as a custom filter predicate.

        The function is returned unchanged.
        """

        def decorator(predicate: Callable[..., Any]) -> Callable[..., Any]:
            self.register(column, options, predicate)
            return predicate

        return decorator

    def apply_filters(self, query: Any, http_params: Mapping[str, Any] | None = None) -> Any:
        """Narrow ``query`` with the registered filters.

        Steps:
            1. Copy the request parameters, adding empty buckets if absent
            2. Inject configured defaults for keys the request did not set
            3. Run the generic search over the ``q`` bucket
            4. Run the first eligible custom filter over ``custom_search``

        Missing or blank request values never raise; they are treated as not
        present.

        Args:
            query: Query to narrow
            http_params: Request parameters, may be ``None``

        Returns:
            The narrowed query
        """
        params = self._prepare_params(http_params)
        search_bucket = params[self.settings.search_param]
        custom_bucket = params[self.settings.custom_search_param]

        self._inject_defaults(search_bucket, custom_bucket)

        search = self.search_backend.search(query, search_bucket)
        self._last_search_result = search
        query = search.result

        return self._apply_custom_filters(query, custom_bucket)

    # ------------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------------

    def _prepare_params(self, http_params: Mapping[str, Any] | None) -> dict[str, Any]:
        params = dict(http_params or {})
        for bucket in (self.settings.search_param, self.settings.custom_search_param):
            value = params.get(bucket)
            # Copy the bucket so defaults never leak into the caller's mapping
            params[bucket] = dict(value) if isinstance(value, Mapping) else {}
        return params

    def _inject_defaults(self, search_bucket: dict[str, Any], custom_bucket: dict[str, Any]) -> None:
        for definition in self._filters:
            defaults = definition.defaults
            if not defaults:
                continue

            bucket = custom_bucket if definition.custom else search_bucket
            for search_key, default in zip(definition.search_keys, defaults, strict=False):
                # Explicit request values win over configured defaults
                current = bucket.get(search_key)
                if current is None or current is False:
                    bucket[search_key] = default
                    logger.debug("filter_default_applied", search_key=search_key)

    def _apply_custom_filters(self, query: Any, custom_bucket: Mapping[str, Any]) -> Any:
        policy = self.settings.custom_filter_policy

        for definition in self._filters:
            if not definition.custom:
                continue

            first_value = custom_bucket.get(definition.search_keys[0])
            last_value = custom_bucket.get(definition.search_keys[-1])

            match definition.predicate:
                case OneValuePredicate(fn=fn):
                    applied = is_present(first_value)
                    if applied:
                        query = fn(query, first_value)
                case TwoValuePredicate(fn=fn):
                    applied = is_present(first_value) and is_present(last_value)
                    if applied:
                        query = fn(query, first_value, last_value)
                case _:
                    continue

            if applied:
                logger.debug("custom_filter_applied", column=definition.column)
                return query
            if policy is CustomFilterPolicy.FIRST_ELIGIBLE:
                logger.debug("custom_filter_pass_stopped", column=definition.column)
                return query

        return query
