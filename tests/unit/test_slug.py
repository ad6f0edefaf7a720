"""Tests for slug generation and collision handling."""

import pytest

from app.utils.slug import DEFAULT_SLUG, next_available_slug, slugify


@pytest.mark.unit
class TestSlugify:
    """Tests for slugify()."""

    def test_lowercases_and_hyphenates(self) -> None:
        assert slugify("Hola Mundo") == "hola-mundo"

    def test_collapses_runs_of_symbols(self) -> None:
        """Any run of non [a-z0-9] characters becomes a single hyphen."""
        assert slugify("Zelda:  Tears -- of the Kingdom!!") == "zelda-tears-of-the-kingdom"

    def test_strips_leading_and_trailing_hyphens(self) -> None:
        assert slugify("  ¡Final Fantasy VII!  ") == "final-fantasy-vii"

    def test_accented_letters_are_separators(self) -> None:
        assert slugify("Reseña") == "rese-a"

    def test_keeps_digits(self) -> None:
        assert slugify("Persona 5 Royal") == "persona-5-royal"

    def test_only_symbols_falls_back_to_default(self) -> None:
        """A title with nothing slug-safe still yields a usable slug."""
        assert slugify("進撃の巨人") == DEFAULT_SLUG
        assert slugify("") == DEFAULT_SLUG
        assert slugify(None) == DEFAULT_SLUG

    @pytest.mark.parametrize("title", ["Hola Mundo", "  A -- B  ", "Ünïcode Tïtle 2"])
    def test_idempotent(self, title: str) -> None:
        assert slugify(slugify(title)) == slugify(title)


@pytest.mark.unit
class TestNextAvailableSlug:
    """Tests for the numeric suffix policy."""

    def test_free_base_is_used_as_is(self) -> None:
        assert next_available_slug("hola-mundo", []) == "hola-mundo"

    def test_taken_base_gets_suffix_one(self) -> None:
        assert next_available_slug("hola-mundo", ["hola-mundo"]) == "hola-mundo-1"

    def test_uses_one_more_than_highest_suffix(self) -> None:
        existing = ["hola-mundo", "hola-mundo-1", "hola-mundo-4"]
        assert next_available_slug("hola-mundo", existing) == "hola-mundo-5"

    def test_suffix_only_family_without_base(self) -> None:
        """The bare slug counts as suffix 0, but only suffixes in use matter."""
        assert next_available_slug("hola-mundo", ["hola-mundo-2"]) == "hola-mundo-3"

    def test_ignores_non_numeric_and_unrelated_slugs(self) -> None:
        existing = ["hola-mundo-cruel", "hola-mundo-2b", "hola"]
        assert next_available_slug("hola-mundo", existing) == "hola-mundo"
