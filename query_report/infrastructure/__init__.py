"""Infrastructure layer containing collaborator implementations."""

__all__ = [
    "config",
    "i18n",
    "logging",
    "search",
]
