from sqlalchemy.exc import OperationalError

from eventhub.models.category_model import Category
from eventhub.repository.refresh_token_repository import RefreshTokenRepository
from eventhub.repository.repository import Repository
from eventhub.result import ErrorType
from eventhub.schema.pagination_schema import PaginationParameters


async def test_insert_and_save_changes(db):
    repo = Repository(db, Category)
    repo.insert(Category(name="Music"))
    repo.insert(Category(name="Sport"))

    saved = await repo.save_changes()

    assert saved.is_success
    assert saved.value == 2
    assert db.query(Category).count() == 2


async def test_get_first_or_default_returns_none_when_missing(db):
    found = await Repository(db, Category).get_first_or_default(Category.name == "Nope")

    assert found.is_success
    assert found.value is None


async def test_get_all_pages_after_counting(db, make_category):
    for name in ["A", "B", "C", "D", "E"]:
        make_category(name)

    result = await Repository(db, Category).get_all(
        pagination=PaginationParameters(page=2, page_size=2), order_by=[Category.name]
    )

    paged = result.value
    assert [c.name for c in paged.items] == ["C", "D"]
    assert paged.total_items == 5
    assert paged.total_pages == 3
    assert paged.has_previous and paged.has_next


async def test_get_all_without_pagination_returns_everything(db, make_category):
    make_category("A")
    make_category("B")

    result = await Repository(db, Category).get_all()

    assert len(result.value.items) == 2
    assert result.value.total_pages == 1


async def test_exists(db, make_category):
    make_category("Music")
    repo = Repository(db, Category)

    assert (await repo.exists(Category.name == "Music")).value is True
    assert (await repo.exists(Category.name == "Sport")).value is False


async def test_unique_violation_becomes_database_error(db, make_category):
    make_category("Music")
    repo = Repository(db, Category)
    repo.insert(Category(name="Music"))

    saved = await repo.save_changes()

    assert saved.error_type is ErrorType.DATABASE_ERROR
    # Session was rolled back and is usable again
    assert db.query(Category).count() == 1


async def test_query_errors_become_database_error(db, monkeypatch):
    def broken_query(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("connection lost"))

    monkeypatch.setattr(db, "query", broken_query)

    found = await Repository(db, Category).get_first_or_default(Category.name == "Music")

    assert found.error_type is ErrorType.DATABASE_ERROR


async def test_revoke_if_active_only_wins_once(db, issuer, make_user):
    user = make_user()
    pair = (await issuer.generate_tokens(db, user)).value
    tokens = RefreshTokenRepository(db)
    stored = (await tokens.get_by_token(pair.refresh_token)).value

    first = await tokens.revoke_if_active(stored.id)
    second = await tokens.revoke_if_active(stored.id)

    assert first.value is True
    assert second.value is False
