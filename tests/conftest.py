"""Global test configuration and fixtures.

Fixture Scoping Strategy:
- session: Test settings, database engine with seeded orders (immutable)
- function: Registries, recording backends, sessions (need fresh state)
"""

from collections.abc import Generator

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session

from query_report.filtering import FilterRegistry
from query_report.infrastructure.config import CustomFilterPolicy, Settings
from query_report.infrastructure.i18n import CatalogLocalizer
from tests.factories import ORDERS, Base, Order, RecordingSearchBackend


# ============================================================================
# Session-Scoped Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Settings with library defaults, independent of the environment."""
    return Settings(
        app_env="testing",
        log_level="DEBUG",
        locale="en",
        default_locale="en",
        search_param="q",
        custom_search_param="custom_search",
        custom_filter_policy=CustomFilterPolicy.FIRST_ELIGIBLE,
    )


@pytest.fixture(scope="session")
def first_applied_settings(test_settings: Settings) -> Settings:
    """Settings whose custom pass keeps scanning until a predicate runs."""
    return test_settings.model_copy(
        update={"custom_filter_policy": CustomFilterPolicy.FIRST_APPLIED}
    )


@pytest.fixture(scope="session")
def db_engine() -> Generator[Engine]:
    """In-memory SQLite engine seeded with :data:`ORDERS`."""
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as session:
        session.add_all([Order(**row) for row in ORDERS])
        session.commit()

    yield engine

    engine.dispose()


# ============================================================================
# Function-Scoped Fixtures
# ============================================================================


@pytest.fixture
def db_session(db_engine: Engine) -> Generator[Session]:
    """Session over the seeded engine."""
    with Session(db_engine) as session:
        yield session


@pytest.fixture
def localizer() -> CatalogLocalizer:
    """Localizer with English and Dutch column labels."""
    return CatalogLocalizer(
        {
            "en": {
                "query_report": {
                    "filters": {
                        "from": "From",
                        "to": "To",
                        "name": {"contains": "Name contains"},
                        "status": {"equals": "Status is"},
                    },
                },
            },
            "nl": {
                "query_report": {
                    "filters": {"from": "Van", "to": "Tot"},
                },
            },
        }
    )


@pytest.fixture
def recording_backend() -> RecordingSearchBackend:
    """Fresh recording search backend."""
    return RecordingSearchBackend()


@pytest.fixture
def registry(
    test_settings: Settings,
    recording_backend: RecordingSearchBackend,
    localizer: CatalogLocalizer,
) -> FilterRegistry:
    """Registry over the recording backend with the first-eligible policy."""
    return FilterRegistry(
        search_backend=recording_backend,
        localizer=localizer,
        settings=test_settings,
    )


@pytest.fixture
def sql_registry(test_settings: Settings, localizer: CatalogLocalizer) -> FilterRegistry:
    """Registry over the SQLAlchemy search backend."""
    return FilterRegistry(localizer=localizer, settings=test_settings)
