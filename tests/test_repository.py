"""
Tests for repositories: error translation, references, listing.
"""

import pytest

from ott_cms.common.exceptions import (
    ConflictError,
    InvalidReferenceError,
    NotFoundError,
    PayloadValidationError,
)
from ott_cms.common.models import MovieStatus
from ott_cms.db_service import (
    CategoryRepository,
    ListQuery,
    MovieRepository,
    Page,
    build_list_query,
)


def _movie(category_id, name="Movie", status=MovieStatus.PENDING, description="desc"):
    return {
        "name": name,
        "description": description,
        "image_url": "images/poster.png",
        "category_id": category_id,
        "status": status,
    }


class TestRepositoryWrites:
    def test_create_and_find(self, db_session):
        repo = CategoryRepository(db_session)

        created = repo.create({"name": "Drama"})
        found = repo.find_by_id(created.id)

        assert found.name == "Drama"
        assert found.created_at is not None
        assert found.updated_at >= found.created_at

    def test_unknown_id(self, db_session):
        with pytest.raises(NotFoundError) as exc_info:
            CategoryRepository(db_session).find_by_id("missing")

        assert exc_info.value.message == "Category not found"

    def test_unique_column_conflict_names_column(self, db_session):
        repo = CategoryRepository(db_session)
        repo.create({"name": "Drama"})

        with pytest.raises(ConflictError) as exc_info:
            repo.create({"name": "Drama"})

        assert exc_info.value.data == {"field": "name"}
        assert repo.count() == 1

    def test_dangling_reference_rejected(self, db_session):
        with pytest.raises(InvalidReferenceError) as exc_info:
            MovieRepository(db_session).create(_movie("no-such-category"))

        assert exc_info.value.message == "The specified category ID does not exist"
        assert MovieRepository(db_session).count() == 0

    def test_update_checks_references(self, db_session):
        category = CategoryRepository(db_session).create({"name": "Drama"})
        repo = MovieRepository(db_session)
        movie = repo.create(_movie(category.id))

        with pytest.raises(InvalidReferenceError):
            repo.update(movie.id, {"category_id": "no-such-category"})

        assert repo.find_by_id(movie.id).category_id == category.id

    def test_update_bumps_updated_at(self, db_session):
        repo = CategoryRepository(db_session)
        created = repo.create({"name": "Drama"})

        updated = repo.update(created.id, {"name": "Thriller"})

        assert updated.name == "Thriller"
        assert updated.updated_at >= created.updated_at

    def test_delete_referenced_row_conflicts(self, db_session):
        category = CategoryRepository(db_session).create({"name": "Drama"})
        MovieRepository(db_session).create(_movie(category.id))

        with pytest.raises(ConflictError):
            CategoryRepository(db_session).delete(category.id)

        # Neither side was touched
        assert CategoryRepository(db_session).find_by_id(category.id).name == "Drama"
        assert MovieRepository(db_session).count(category_id=category.id) == 1

    def test_delete_returns_record(self, db_session):
        category = CategoryRepository(db_session).create({"name": "Drama"})
        movie = MovieRepository(db_session).create(_movie(category.id))

        deleted = MovieRepository(db_session).delete(movie.id)

        assert deleted.id == movie.id
        assert deleted.category.name == "Drama"
        with pytest.raises(NotFoundError):
            MovieRepository(db_session).find_by_id(movie.id)


class TestRepositoryListing:
    def test_pages_and_total(self, db_session):
        repo = CategoryRepository(db_session)
        for i in range(15):
            repo.create({"name": f"Category {i:02d}"})

        items, total = repo.find_many(build_list_query(page=2, limit=10))

        assert total == 15
        assert [c.name for c in items] == [f"Category {i:02d}" for i in range(10, 15)]

    def test_page_past_end_is_empty(self, db_session):
        repo = CategoryRepository(db_session)
        repo.create({"name": "Drama"})

        items, total = repo.find_many(build_list_query(page=3, limit=10))

        assert items == []
        assert total == 1

    def test_search_is_case_insensitive_across_fields(self, db_session):
        category = CategoryRepository(db_session).create({"name": "Drama"})
        repo = MovieRepository(db_session)
        repo.create(_movie(category.id, name="Night Train"))
        repo.create(_movie(category.id, name="Sunrise", description="a NIGHT at sea"))
        repo.create(_movie(category.id, name="Daylight"))

        items, total = repo.find_many(build_list_query(query="night"))

        assert total == 2
        assert {m.name for m in items} == {"Night Train", "Sunrise"}

    def test_equality_filters(self, db_session):
        category = CategoryRepository(db_session).create({"name": "Drama"})
        repo = MovieRepository(db_session)
        repo.create(_movie(category.id, name="A", status=MovieStatus.PUBLISHED))
        repo.create(_movie(category.id, name="B"))

        query = ListQuery().with_filters(status=MovieStatus.PUBLISHED, category_id=None)
        items, total = repo.find_many(query)

        assert total == 1
        assert items[0].name == "A"
        assert repo.count(status=MovieStatus.PENDING) == 1
        assert repo.count(status=None) == 2

    def test_newest_first_by_default(self, db_session):
        category = CategoryRepository(db_session).create({"name": "Drama"})
        repo = MovieRepository(db_session)
        first = repo.create(_movie(category.id, name="First"))
        second = repo.create(_movie(category.id, name="Second"))
        # Force distinct timestamps
        repo.get_model(first.id).created_at = 1_000
        repo.get_model(second.id).created_at = 2_000
        db_session.commit()

        items, _total = repo.find_many(ListQuery())

        assert [m.name for m in items] == ["Second", "First"]

    def test_explicit_sort(self, db_session):
        repo = CategoryRepository(db_session)
        for name in ("b", "c", "a"):
            repo.create({"name": name})

        items, _total = repo.find_many(build_list_query(sort="-name"))

        assert [c.name for c in items] == ["c", "b", "a"]

    def test_unknown_sort_column_rejected(self, db_session):
        with pytest.raises(PayloadValidationError) as exc_info:
            CategoryRepository(db_session).find_many(build_list_query(sort="password"))

        assert exc_info.value.field == "sort"

    def test_page_wrapper(self, db_session):
        repo = CategoryRepository(db_session)
        for i in range(3):
            repo.create({"name": f"C{i}"})
        query = build_list_query(page=1, limit=2)
        items, total = repo.find_many(query)

        wrapper = Page(items=items, total=total, page=query.page, limit=query.limit).to_wrapper(
            "totalCategories"
        )

        assert wrapper["totalPages"] == 2
        assert wrapper["currentPage"] == 1
        assert wrapper["totalCategories"] == 3
        assert [c["name"] for c in wrapper["data"]] == ["C0", "C1"]


class TestListQuery:
    def test_defaults(self):
        query = build_list_query()

        assert (query.page, query.limit, query.query, query.sort) == (1, 10, "", None)
        assert query.offset == 0

    def test_search_text_trimmed_and_none_filters_dropped(self):
        query = build_list_query(page=3, limit=5, query="  drama ", status=None, category_id="c1")

        assert query.query == "drama"
        assert query.filters == {"category_id": "c1"}
        assert query.offset == 10

    @pytest.mark.parametrize(
        "kwargs, field",
        [({"page": 0}, "page"), ({"limit": 0}, "limit"), ({"limit": 101}, "limit")],
    )
    def test_out_of_range(self, kwargs, field):
        with pytest.raises(PayloadValidationError) as exc_info:
            build_list_query(**kwargs)

        assert exc_info.value.field == field
