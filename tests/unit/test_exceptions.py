"""Tests for query report exceptions.

Test Organization:
- TestQueryReportException: Base exception behavior
- TestExceptionCodes: Exception code verification
- TestExceptionPropertyBased: Property-based tests with Hypothesis
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from query_report.domain.exceptions import (
    FilterConfigurationError,
    QueryReportException,
    SearchBackendError,
)


class TestQueryReportException:
    """Test base exception behavior."""

    def test_creates_exception_with_message_only(self) -> None:
        """Test creating exception with message only.

        Arrange: Message string
        Act: Create QueryReportException with message
        Assert: Exception has correct message and no details
        """
        # Arrange
        message = "Something went wrong"

        # Act
        exception = QueryReportException(message)

        # Assert
        assert exception.message == message
        assert str(exception) == message
        assert exception.details is None

    def test_creates_exception_with_details(self) -> None:
        """Test details are kept as given."""
        # Arrange
        details = {"column": "status"}

        # Act
        exception = FilterConfigurationError("Invalid options", details)

        # Assert
        assert exception.details == details

    @pytest.mark.parametrize("exception_class", [FilterConfigurationError, SearchBackendError])
    def test_subclasses_are_caught_as_base(self, exception_class) -> None:
        """Test all errors share the base class."""
        # Act & Assert
        with pytest.raises(QueryReportException):
            raise exception_class("boom")


class TestExceptionCodes:
    """Test exception code verification."""

    @pytest.mark.parametrize(
        ("exception_class", "code"),
        [
            (QueryReportException, "QUERY_REPORT_ERROR"),
            (FilterConfigurationError, "FILTER_CONFIGURATION_ERROR"),
            (SearchBackendError, "SEARCH_BACKEND_ERROR"),
        ],
    )
    def test_codes(self, exception_class, code: str) -> None:
        """Test each class carries its machine-readable code."""
        # Act & Assert
        assert exception_class("x").code == code


class TestExceptionPropertyBased:
    """Property-based tests with Hypothesis."""

    @given(message=st.text(min_size=1, max_size=200))
    def test_message_round_trips_to_str(self, message: str) -> None:
        """Test str() of any exception is its message."""
        # Act & Assert
        assert str(FilterConfigurationError(message)) == message
