"""
Locale-aware field selection for translated review content.

Reviews carry an optional translation per language (``title_es``,
``content_en``, ...) next to the legacy single-language column (``title``,
``content``). ``resolve`` picks what to display; ``has_locale`` tells whether
that text is a genuine translation or the inherited original.
"""

from collections.abc import Mapping
from typing import Any

from app.config import Locale


def _field_value(record: Any, name: str) -> str | None:
    if isinstance(record, Mapping):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    return value if isinstance(value, str) else None


def locale_field(field: str, locale: str) -> str | None:
    """Name of the locale-specific column for ``field``, or None for unsupported locales."""
    if locale not in Locale.ALL:
        return None
    return f"{field}_{locale}"


def resolve(record: Any, field: str, locale: str) -> str:
    """
    Best value of ``field`` for ``locale``.

    Returns the locale-specific value if non-empty, otherwise the legacy
    value, otherwise an empty string.

    Args:
        record: ORM object or mapping with the fields as attributes/keys
        field: Base field name ("title" or "content")
        locale: "es" or "en"; anything else only considers the legacy field
    """
    specific = locale_field(field, locale)
    if specific:
        value = _field_value(record, specific)
        if value:
            return value
    return _field_value(record, field) or ""


def has_locale(record: Any, field: str, locale: str) -> bool:
    """True only when a non-empty locale-specific value exists (fallbacks don't count)."""
    specific = locale_field(field, locale)
    if not specific:
        return False
    return bool(_field_value(record, specific))
