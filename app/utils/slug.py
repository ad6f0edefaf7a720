"""
Slug generation for review URLs.

A slug is the lower-cased title with every run of characters outside
[a-z0-9] collapsed to a single hyphen, and no leading or trailing hyphen.
Titles that leave nothing behind (e.g. only non-Latin characters) fall back
to DEFAULT_SLUG.
"""

import re
from collections.abc import Iterable

DEFAULT_SLUG = "review"

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")


def slugify(text: str | None) -> str:
    """
    Convert a title into a URL-safe slug.

    Idempotent: slugify(slugify(x)) == slugify(x).

    Examples:
        >>> slugify("Hola Mundo")
        'hola-mundo'
        >>> slugify("  Zelda: Tears of the Kingdom!! ")
        'zelda-tears-of-the-kingdom'
    """
    slug = _NON_ALNUM_RUN.sub("-", (text or "").lower()).strip("-")
    return slug or DEFAULT_SLUG


def next_available_slug(base: str, existing: Iterable[str]) -> str:
    """
    Pick a free slug for ``base`` given the slugs already sharing that base.

    The bare slug counts as suffix 0. If any slug of the family is taken, the
    result is ``{base}-{N}`` with N one greater than the highest numeric
    suffix in use.

    Args:
        base: Slug computed from the title
        existing: Candidate slugs from storage (may include unrelated ones)

    Returns:
        Unused slug
    """
    suffix_pattern = re.compile(rf"^{re.escape(base)}-(\d+)$")
    highest: int | None = None

    for slug in existing:
        if slug == base:
            suffix = 0
        else:
            match = suffix_pattern.match(slug)
            if not match:
                continue
            suffix = int(match.group(1))
        highest = suffix if highest is None else max(highest, suffix)

    if highest is None:
        return base
    return f"{base}-{highest + 1}"
