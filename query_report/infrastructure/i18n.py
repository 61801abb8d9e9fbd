"""Catalog-backed localization of filter labels.

Catalogs are nested dictionaries keyed by locale, looked up with dotted keys:

    catalogs = {
        "en": {"query_report": {"filters": {"from": "From", "to": "To"}}},
    }
    CatalogLocalizer(catalogs).translate("query_report.filters.from")  # "From"

A missing translation never raises. The lookup falls back to the default
locale and finally to a label humanized from the key itself.
"""

from collections.abc import Mapping
from typing import Any

from query_report.domain.interfaces import ILocalizer
from query_report.infrastructure.logging import get_logger


logger = get_logger(__name__)


DEFAULT_CATALOGS: dict[str, dict[str, Any]] = {
    "en": {
        "query_report": {
            "filters": {
                "from": "From",
                "to": "To",
            },
        },
    },
}


def humanize_key(key: str) -> str:
    """Build a readable label from the last two segments of a dotted key.

    ``query_report.filters.created_at.equals`` becomes ``"Created at equals"``.
    """
    parts = [part for part in key.split(".") if part]
    if not parts:
        return ""
    text = " ".join(parts[-2:]).replace("_", " ").strip()
    return text[:1].upper() + text[1:]


class CatalogLocalizer(ILocalizer):
    """Resolve labels from in-memory translation catalogs."""

    def __init__(
        self,
        catalogs: Mapping[str, Mapping[str, Any]] | None = None,
        *,
        locale: str = "en",
        default_locale: str = "en",
    ) -> None:
        self._catalogs = catalogs if catalogs is not None else DEFAULT_CATALOGS
        self.locale = locale
        self.default_locale = default_locale

    def translate(self, key: str) -> str:
        for locale in dict.fromkeys((self.locale, self.default_locale)):
            value = self._lookup(locale, key)
            if isinstance(value, str):
                return value

        logger.debug("translation_missing", key=key, locale=self.locale)
        return humanize_key(key)

    def _lookup(self, locale: str, key: str) -> Any:
        node: Any = self._catalogs.get(locale)
        for segment in key.split("."):
            if not isinstance(node, Mapping):
                return None
            node = node.get(segment)
        return node
