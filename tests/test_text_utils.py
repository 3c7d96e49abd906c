"""
Test string helpers used for slugs, genres and page ordering.
"""
from mangashelf.utils.text import (
    is_numeric_volume,
    is_safe_slug,
    join_genres,
    natural_key,
    replace_prefix,
    slugify_title,
    split_genres,
    title_from_slug,
)


class TestSlugify:
    """Test slug derivation."""

    def test_lowercases_and_hyphenates(self):
        assert slugify_title("One Piece") == "one-piece"

    def test_collapses_whitespace_runs(self):
        assert slugify_title("  Attack   on\tTitan  ") == "attack-on-titan"

    def test_keeps_punctuation(self):
        assert slugify_title("Dr. Stone!") == "dr.-stone!"

    def test_idempotent(self):
        once = slugify_title("Chainsaw Man Part 2")
        assert slugify_title(once) == once

    def test_unsafe_slugs_rejected(self):
        assert is_safe_slug("one-piece")
        assert not is_safe_slug("")
        assert not is_safe_slug("..")
        assert not is_safe_slug("a/b")
        assert not is_safe_slug("a\\b")

    def test_title_from_slug(self):
        assert title_from_slug("my_hero-academia") == "My Hero Academia"


class TestGenres:
    """Test genre splitting."""

    def test_split_trims_and_drops_empty(self):
        assert split_genres(" Action, ,Drama ,") == ["Action", "Drama"]

    def test_split_empty(self):
        assert split_genres("") == []
        assert split_genres(None) == []

    def test_join(self):
        assert join_genres(["Action ", "Drama, Comedy"]) == "Action, Drama, Comedy"


class TestOrdering:
    """Test natural ordering and volume detection."""

    def test_natural_order(self):
        names = ["page10.jpg", "page2.jpg", "page1.jpg", "Page3.jpg"]
        assert sorted(names, key=natural_key) == [
            "page1.jpg",
            "page2.jpg",
            "Page3.jpg",
            "page10.jpg",
        ]

    def test_mixed_names_do_not_raise(self):
        names = ["10", "a", "2b", "b2"]
        assert sorted(names, key=natural_key) == ["2b", "10", "a", "b2"]

    def test_numeric_volume(self):
        assert is_numeric_volume("3")
        assert is_numeric_volume("10.5")
        assert not is_numeric_volume("Extra")
        assert not is_numeric_volume("Volume 3")

    def test_replace_prefix(self):
        assert replace_prefix("/manga/a/cover.jpg", "/manga/a/", "/manga/b/") == "/manga/b/cover.jpg"
        assert replace_prefix("/manga/ab/cover.jpg", "/manga/a/", "/manga/b/") == "/manga/ab/cover.jpg"
        assert replace_prefix(None, "/manga/a/", "/manga/b/") is None
