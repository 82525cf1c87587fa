"""Unit tests for PooledArticleRepository against a stub pool."""

from datetime import datetime, timezone
from typing import Any

import pytest

from app.application.schemas import ArticleCreate, ArticleUpdate
from app.domain.exceptions import PersistenceError
from app.infrastructure.database.pool import ExecuteResult
from app.infrastructure.database.repositories import PooledArticleRepository


class StubPool:
    """Records statements and replays canned results in order."""

    def __init__(self):
        self.executed: list[Any] = []
        self.queried: list[Any] = []
        self.execute_results: list[ExecuteResult] = []
        self.query_results: list[list[dict[str, Any]]] = []

    async def execute(self, statement, params=None) -> ExecuteResult:
        self.executed.append(statement)
        return self.execute_results.pop(0)

    async def query(self, statement, params=None) -> list[dict[str, Any]]:
        self.queried.append(statement)
        return self.query_results.pop(0) if self.query_results else []


def _row(article_id: int = 1, **overrides) -> dict[str, Any]:
    row = {
        "id": article_id,
        "name": "Mechanical Keyboard",
        "brand": "LogiTech",
        "modified_at": datetime(2024, 1, 1, tzinfo=timezone.utc),
        "is_active": 1,
    }
    row.update(overrides)
    return row


def _where(statement) -> str:
    return str(statement.compile()).split("WHERE", 1)[1]


@pytest.fixture
def pool() -> StubPool:
    return StubPool()


@pytest.fixture
def repository(pool: StubPool) -> PooledArticleRepository:
    return PooledArticleRepository(pool)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_create_inserts_active_and_rereads(pool: StubPool, repository):
    pool.execute_results.append(ExecuteResult(rows_affected=1, inserted_id=7))
    pool.query_results.append([_row(7)])

    article = await repository.create(ArticleCreate(name="Mechanical Keyboard", brand="LogiTech"))

    assert article.id == 7
    params = pool.executed[0].compile().params
    assert params["name"] == "Mechanical Keyboard"
    assert params["brand"] == "LogiTech"
    assert params["is_active"] is True
    assert 7 in pool.queried[0].compile().params.values()


@pytest.mark.asyncio
async def test_create_without_generated_id_fails(pool: StubPool, repository):
    pool.execute_results.append(ExecuteResult(rows_affected=1, inserted_id=None))

    with pytest.raises(PersistenceError):
        await repository.create(ArticleCreate(name="Keyboard", brand="Logi"))
    assert pool.queried == []


@pytest.mark.asyncio
async def test_create_reread_miss_is_consistency_error(pool: StubPool, repository):
    pool.execute_results.append(ExecuteResult(rows_affected=1, inserted_id=3))
    pool.query_results.append([])

    with pytest.raises(PersistenceError, match="not found after creation"):
        await repository.create(ArticleCreate(name="Keyboard", brand="Logi"))


@pytest.mark.asyncio
async def test_values_are_bound_not_interpolated(pool: StubPool, repository):
    hostile = "x'; DROP TABLE articles; --"
    pool.execute_results.append(ExecuteResult(rows_affected=1, inserted_id=1))
    pool.query_results.append([_row(1, name=hostile)])

    await repository.create(ArticleCreate(name=hostile, brand="Evil Corp"))

    compiled = pool.executed[0].compile()
    assert hostile not in str(compiled)
    assert compiled.params["name"] == hostile


@pytest.mark.asyncio
async def test_find_by_id_absent_returns_none(pool: StubPool, repository):
    assert await repository.find_by_id(99) is None


@pytest.mark.asyncio
async def test_find_substring_by_default(pool: StubPool, repository):
    pool.query_results.append([_row(1), _row(2, is_active=0)])

    found = await repository.find("Keyboard")

    assert [a.id for a in found] == [1, 2]
    where = _where(pool.queried[0])
    assert "LIKE" in where
    assert "Keyboard" in pool.queried[0].compile().params.values()


@pytest.mark.asyncio
async def test_find_exact_match(pool: StubPool, repository):
    await repository.find("Keyboard", exact_match=True)

    where = _where(pool.queried[0])
    assert "LIKE" not in where
    assert "articles.name =" in where


@pytest.mark.asyncio
async def test_find_active_filter(pool: StubPool, repository):
    await repository.find(is_active=False)
    assert "is_active" in _where(pool.queried[0])


@pytest.mark.asyncio
async def test_find_without_filters_has_no_where(pool: StubPool, repository):
    assert await repository.find() == []
    assert "WHERE" not in str(pool.queried[0].compile())


@pytest.mark.asyncio
async def test_update_empty_dto_skips_write(pool: StubPool, repository):
    pool.query_results.append([_row(5)])

    article = await repository.update(5, ArticleUpdate())

    assert article is not None and article.id == 5
    assert pool.executed == []


@pytest.mark.asyncio
async def test_update_sets_only_present_fields(pool: StubPool, repository):
    pool.execute_results.append(ExecuteResult(rows_affected=1))
    pool.query_results.append([_row(5, brand="Razer")])

    article = await repository.update(5, ArticleUpdate(brand="Razer"))

    assert article is not None and article.brand == "Razer"
    compiled = pool.executed[0].compile()
    assert compiled.params["brand"] == "Razer"
    assert "name" not in compiled.params
    assert "is_active" not in compiled.params
    assert "modified_at" in str(compiled)


@pytest.mark.asyncio
async def test_update_unknown_id_returns_none(pool: StubPool, repository):
    pool.execute_results.append(ExecuteResult(rows_affected=0))

    assert await repository.update(404, ArticleUpdate(name="Anything")) is None
    assert pool.queried == []


@pytest.mark.asyncio
async def test_deactivate_reports_affected_rows(pool: StubPool, repository):
    pool.execute_results.extend([ExecuteResult(rows_affected=1), ExecuteResult(rows_affected=0)])

    assert await repository.deactivate(1) is True
    assert await repository.deactivate(1) is False

    statement = pool.executed[0]
    assert "is_active" in _where(statement)
    assert "modified_at" in str(statement.compile())


@pytest.mark.asyncio
@pytest.mark.parametrize("article_id", [0, -1, 2**31, 10**20])
async def test_ids_outside_key_range_never_reach_the_store(pool: StubPool, repository, article_id):
    assert await repository.find_by_id(article_id) is None
    assert await repository.update(article_id, ArticleUpdate(name="Ghost")) is None
    assert await repository.deactivate(article_id) is False
    assert pool.executed == []
    assert pool.queried == []


@pytest.mark.asyncio
async def test_naive_store_timestamps_are_read_as_utc(pool: StubPool, repository):
    pool.query_results.append([_row(3, modified_at=datetime(2024, 1, 1, 12, 30, 0, 250000))])

    article = await repository.find_by_id(3)

    assert article is not None
    assert article.modified_at == datetime(2024, 1, 1, 12, 30, 0, 250000, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_update_stamps_current_utc_time(pool: StubPool, repository):
    pool.execute_results.append(ExecuteResult(rows_affected=1))
    pool.query_results.append([_row(5)])
    before = datetime.now(timezone.utc)

    await repository.update(5, ArticleUpdate(name="Keyboard"))

    stamped = pool.executed[0].compile().params["modified_at"]
    assert stamped.tzinfo is not None
    assert stamped >= before
