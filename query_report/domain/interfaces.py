"""Collaborator interfaces used by the filter registry.

The registry only depends on these contracts: a search backend that turns the
generic-search bucket into a query, and a localizer that resolves comparator
labels. Infrastructure provides the concrete implementations.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Protocol


class ISearchResult(Protocol):
    """Object returned by a search backend.

    Only ``result`` is required by the registry; backends may expose more.
    """

    @property
    def result(self) -> Any:
        """The query with the generic-search predicates applied."""


class ISearchBackend(ABC):
    """Translates a generic-search bucket into predicates on a query.

    Keys follow the ``"{column}_{comparator}"`` naming convention, for example
    ``created_at_gteq`` or ``name_cont``.
    """

    @abstractmethod
    def search(self, query: Any, conditions: Mapping[str, Any]) -> ISearchResult:
        """Apply every condition in the bucket to the query.

        Args:
            query: Query object to narrow
            conditions: Mapping of search key to request value

        Returns:
            Search result exposing the narrowed query as ``result``
        """


class ILocalizer(ABC):
    """Resolves a dotted translation key to a human-readable label."""

    @abstractmethod
    def translate(self, key: str) -> str:
        """Return the label for ``key``.

        Implementations must not raise on a missing translation.
        """
