"""Exceptions raised by the filter registry and its collaborators.

Request data never produces an exception: missing or malformed parameters are
resolved to "not present". These errors are raised while a report is being
configured, or when a collaborator is wired up incorrectly.
"""

from typing import Any


class QueryReportException(Exception):
    """Base exception for all query report errors.

    Attributes:
        code: Machine-readable error code
        message: Human-readable error message
        details: Optional additional error context (dict or list)
    """

    code: str = "QUERY_REPORT_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | list[Any] | None = None) -> None:
        """Initialize query report exception.

        Args:
            message: Human-readable error description
            details: Optional additional context about the error
        """
        self.message = message
        self.details = details
        super().__init__(self.message)


class FilterConfigurationError(QueryReportException):
    """Raised when a filter is registered with invalid options.

    Use this exception for problems detectable at registration time, such as
    a blank column name or a ``comp`` option that is not a mapping.
    """

    code = "FILTER_CONFIGURATION_ERROR"


class SearchBackendError(QueryReportException):
    """Raised when the search backend cannot work with the given query.

    For example when no mapped entity can be derived from a select statement.
    """

    code = "SEARCH_BACKEND_ERROR"
