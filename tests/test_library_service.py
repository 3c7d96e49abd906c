"""
Test library facets: volumes, related titles, genres and pagination.
"""
from datetime import datetime, timedelta
from types import SimpleNamespace

from mangashelf.services import library_service


def _chapter(id, volume, minutes=0):
    return SimpleNamespace(
        id=id,
        title=f"Chapter {id}",
        slug=f"chapter-{id}",
        volume=volume,
        created_at=datetime(2024, 1, 1) + timedelta(minutes=minutes),
    )


def _manga(id, author=None, genre="", rating=""):
    return SimpleNamespace(
        id=id,
        author=author,
        genre=genre,
        rating=rating,
        is_adult=rating == "18+",
    )


class TestVolumeGrouping:
    """Test chapter grouping by volume."""

    def test_group_order(self):
        chapters = [
            _chapter(1, "1"),
            _chapter(2, "Extra"),
            _chapter(3, "Unknown Volume"),
            _chapter(4, "10"),
            _chapter(5, "2"),
            _chapter(6, "Omake"),
        ]
        groups = library_service.group_volumes(chapters)

        assert [g.label for g in groups] == [
            "Unknown Volume",
            "Volume 10",
            "Volume 2",
            "Volume 1",
            "Specials",
        ]
        assert [c.id for c in groups[-1].chapters] == [6, 2]

    def test_chapters_newest_first_within_group(self):
        chapters = [_chapter(1, "1", 0), _chapter(2, "1", 5), _chapter(3, "1", 5)]
        groups = library_service.group_volumes(chapters)

        assert len(groups) == 1
        assert [c.id for c in groups[0].chapters] == [3, 2, 1]

    def test_blank_volume_is_unknown(self):
        groups = library_service.group_volumes([_chapter(1, "  ")])
        assert groups[0].label == "Unknown Volume"

    def test_empty(self):
        assert library_service.group_volumes([]) == []


class TestRelatedTitles:
    """Test related-title scoring."""

    def test_scoring(self):
        base = _manga(1, author="Oda", genre="Action, Adventure")
        same_author = _manga(2, author="Oda", genre="Romance")
        shared_genres = _manga(3, author="Other", genre="action, adventure, drama")
        one_genre = _manga(4, genre="Adventure")
        unrelated = _manga(5, author="Other", genre="Horror")

        related = library_service.related_titles(
            base, [base, same_author, shared_genres, one_genre, unrelated]
        )

        assert [(m.id, score) for m, score in related] == [(2, 2), (3, 2), (4, 1)]

    def test_empty_author_never_matches(self):
        base = _manga(1, author="", genre="")
        other = _manga(2, author="", genre="")
        assert library_service.related_titles(base, [other]) == []

    def test_family_safe_hides_adult(self):
        base = _manga(1, genre="Drama")
        adult = _manga(2, genre="Drama", rating="18+")

        assert library_service.related_titles(base, [adult], family_safe=True) == []
        assert len(library_service.related_titles(base, [adult], family_safe=False)) == 1

    def test_capped_at_six(self):
        base = _manga(1, genre="Action")
        candidates = [_manga(i, genre="Action") for i in range(2, 12)]
        assert len(library_service.related_titles(base, candidates)) == 6


class TestFacets:
    """Test genre universe, hot flag, genre filter and pagination."""

    def test_genre_universe(self):
        genres = library_service.genre_universe(["Action, Drama", "drama", "Action,  Comedy", ""])
        assert genres == ["Action", "Comedy", "Drama", "drama"]

    def test_hot_threshold(self):
        assert not library_service.is_hot(2)
        assert library_service.is_hot(3)

    def test_filter_by_genre_is_exact_membership(self):
        mangas = [_manga(1, genre="Action, Drama"), _manga(2, genre="Action Drama")]
        assert [m.id for m in library_service.filter_by_genre(mangas, "Drama")] == [1]
        assert len(library_service.filter_by_genre(mangas, None)) == 2

    def test_pagination(self):
        items = list(range(23))
        page_items, page, total_pages = library_service.paginate(items, 3, 10)
        assert total_pages == 3
        assert page_items == [20, 21, 22]

    def test_pagination_clamps_and_overflows(self):
        items = list(range(5))
        assert library_service.paginate(items, 0, 10) == ([0, 1, 2, 3, 4], 1, 1)
        assert library_service.paginate(items, 4, 10) == ([], 4, 1)
        assert library_service.paginate([], 1, 10) == ([], 1, 0)
