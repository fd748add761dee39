"""Integration tests for repository pagination against SQLite.

Rows: a(id=1, field="foo"), b(id=2, field="bar"), c(id=3, field="foo").
"""
from __future__ import annotations

import base64
from datetime import datetime, timedelta
import json
import logging

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from keyset_pager.core.database import (
    BaseRepository,
    MalformedCursorError,
    SQLAlchemyQueryExecutor,
    UnknownFieldError,
    WhereIfDefined,
)
from keyset_pager.core.pagination import CursorCodec, Paginator, encode_cursor
from tests.utils import A, B, C, Item, ids

COMPOUND = ["field", "id"]
COMPOUND_DESC = ["field", {"field": "id", "direction": "DESC"}]


@pytest.fixture
def repo() -> BaseRepository[Item]:
    return BaseRepository(Item)


def cursor(row, order_by="id") -> str:
    return encode_cursor(order_by, row)


class TestCursorPagination:
    """Cursor pagination through BaseRepository.paginate_cursor."""

    async def test_first(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(seeded_session, order_by="id", first=100)

        assert connection.result_count == 3
        assert ids(connection.nodes) == [1, 2, 3]
        assert all(isinstance(node, Item) for node in connection.nodes)
        assert connection.page_info.has_next_page is False
        assert connection.page_info.has_previous_page is False

    async def test_descending(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session, order_by={"field": "id", "direction": "DESC"}, first=100
        )

        assert ids(connection.nodes) == [3, 2, 1]

    async def test_serialize_hook(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session,
            order_by={"field": "id", "serialize": lambda v: v + 1},
            first=100,
        )

        values = [CursorCodec.load(edge.cursor).values for edge in connection.edges]
        assert values == [(2,), (3,), (4,)]

    async def test_deserialize_hook(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session,
            order_by={"field": "id", "deserialize": lambda v: int(v) + 1},
            first=100,
            after=cursor(A),
        )

        assert connection.result_count == 1
        assert ids(connection.nodes) == [3]

    async def test_first_one(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(seeded_session, order_by="id", first=1)

        assert connection.result_count == 3
        assert ids(connection.nodes) == [1]
        assert connection.page_info.has_next_page is True
        assert connection.page_info.has_previous_page is False

    async def test_last_one(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(seeded_session, order_by="id", last=1)

        assert connection.result_count == 3
        assert ids(connection.nodes) == [3]
        assert connection.page_info.has_next_page is False
        assert connection.page_info.has_previous_page is True

    async def test_after(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session, order_by="id", first=100, after=cursor(A)
        )

        assert connection.result_count == 2
        assert ids(connection.nodes) == [2, 3]

    async def test_before(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session, order_by="id", last=100, before=cursor(C)
        )

        assert connection.result_count == 2
        assert ids(connection.nodes) == [1, 2]

    async def test_first_after(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session, order_by="id", first=1, after=cursor(A)
        )

        assert connection.result_count == 2
        assert ids(connection.nodes) == [2]
        assert connection.page_info.has_next_page is True

    async def test_last_after(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session, order_by="id", last=1, after=cursor(A)
        )

        assert connection.result_count == 2
        assert ids(connection.nodes) == [3]
        assert connection.page_info.has_previous_page is True

    async def test_first_before(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session, order_by="id", first=1, before=cursor(C)
        )

        assert ids(connection.nodes) == [1]
        assert connection.page_info.has_next_page is True

    async def test_last_before(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session, order_by="id", last=1, before=cursor(C)
        )

        assert ids(connection.nodes) == [2]
        assert connection.page_info.has_previous_page is True

    async def test_compound(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(seeded_session, order_by=COMPOUND, first=100)

        assert ids(connection.nodes) == [2, 1, 3]

    async def test_compound_with_direction(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session, order_by=COMPOUND_DESC, first=100
        )

        assert ids(connection.nodes) == [2, 3, 1]

    async def test_compound_after_and_before(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session,
            order_by=COMPOUND,
            first=2,
            after=cursor(B, COMPOUND),
            before=cursor(C, COMPOUND),
        )

        assert connection.result_count == 1
        assert ids(connection.nodes) == [1]

    async def test_compound_with_direction_before(self, repo, seeded_session: AsyncSession):
        connection = await repo.paginate_cursor(
            seeded_session,
            order_by=COMPOUND_DESC,
            first=2,
            before=cursor(A, COMPOUND_DESC),
        )

        assert connection.result_count == 2
        assert ids(connection.nodes) == [2, 3]

    async def test_cursor_from_returned_edges(self, repo, seeded_session: AsyncSession):
        first_page = await repo.paginate_cursor(seeded_session, order_by=COMPOUND, first=2)

        second_page = await repo.paginate_cursor(
            seeded_session,
            order_by=COMPOUND,
            first=2,
            after=first_page.page_info.end_cursor,
        )

        assert ids(first_page.nodes) == [2, 1]
        assert ids(second_page.nodes) == [3]
        assert second_page.page_info.has_next_page is False

    async def test_caller_filters_are_kept(self, repo, seeded_session: AsyncSession):
        stmt = WhereIfDefined(Item.field, "foo").apply(select(Item))

        connection = await repo.paginate_cursor(seeded_session, stmt, order_by="id", first=10)

        assert connection.result_count == 2
        assert ids(connection.nodes) == [1, 3]

    async def test_undefined_filter_is_skipped(self, repo, seeded_session: AsyncSession):
        stmt = WhereIfDefined(Item.field, None).apply(select(Item))

        connection = await repo.paginate_cursor(seeded_session, stmt, order_by="id", first=10)

        assert connection.result_count == 3

    async def test_core_table_statement_returns_rows(self, seeded_session: AsyncSession):
        table = Item.__table__
        executor = SQLAlchemyQueryExecutor(seeded_session, select(table))

        connection = await Paginator(executor).paginate(COMPOUND_DESC, first=2)

        assert [row.id for row in connection.nodes] == [2, 3]
        assert connection.page_info.has_next_page is True

    async def test_labeled_column(self, seeded_session: AsyncSession):
        stmt = select(Item.id, Item.field.label("kind"))
        executor = SQLAlchemyQueryExecutor(seeded_session, stmt)

        connection = await Paginator(executor).paginate(
            [{"field": "kind", "direction": "DESC"}, "id"], first=10
        )

        assert [row.id for row in connection.nodes] == [1, 3, 2]
        assert CursorCodec.load(connection.page_info.end_cursor).values == ("bar", 2)

    async def test_column_select_rejects_unselected_field(self, seeded_session: AsyncSession):
        """Only the selected columns of a non-entity statement are sortable."""
        executor = SQLAlchemyQueryExecutor(seeded_session, select(Item.id))

        with pytest.raises(UnknownFieldError) as exc_info:
            await Paginator(executor).paginate("field", first=1)

        assert exc_info.value.field == "field"

    async def test_caller_limit_and_offset_are_replaced(self, repo, seeded_session: AsyncSession):
        stmt = select(Item).limit(2).offset(1)

        connection = await repo.paginate_cursor(seeded_session, stmt, order_by="id", first=1)

        assert ids(connection.nodes) == [1]
        assert connection.result_count == await repo.count(seeded_session) == 3
        assert connection.page_info.has_next_page is True

    async def test_datetime_cursor_is_coerced(self, repo, db_session: AsyncSession):
        start = datetime(2025, 1, 15, 10, 30)
        db_session.add_all(
            [
                Item(id=i, unique=f"u{i}", field="x", created_at=start + timedelta(hours=i))
                for i in range(1, 5)
            ]
        )
        await db_session.flush()
        order_by = [{"field": "created_at", "direction": "DESC"}, "id"]

        first_page = await repo.paginate_cursor(db_session, order_by=order_by, first=2)
        second_page = await repo.paginate_cursor(
            db_session, order_by=order_by, first=2, after=first_page.page_info.end_cursor
        )

        assert ids(first_page.nodes) == [4, 3]
        assert ids(second_page.nodes) == [2, 1]
        assert second_page.result_count == 2

    async def test_unknown_field(self, repo, seeded_session: AsyncSession):
        with pytest.raises(UnknownFieldError) as exc_info:
            await repo.paginate_cursor(seeded_session, order_by="missing", first=1)

        assert exc_info.value.field == "missing"

    async def test_malformed_cursor_is_logged_and_raised(
        self, repo, seeded_session: AsyncSession, caplog: pytest.LogCaptureFixture
    ):
        with caplog.at_level(logging.INFO, logger="repository.Item"):
            with pytest.raises(MalformedCursorError):
                await repo.paginate_cursor(
                    seeded_session, order_by="id", first=1, after=cursor(A, COMPOUND)
                )

        assert any(record.getMessage() == "Rejected malformed cursor" for record in caplog.records)

    async def test_nested_cursor_value_is_malformed(self, repo, seeded_session: AsyncSession):
        payload = json.dumps({"v": 1, "k": [{"x": 1}]}).encode()
        nested = base64.urlsafe_b64encode(payload).decode().rstrip("=")

        with pytest.raises(MalformedCursorError):
            await repo.paginate_cursor(seeded_session, order_by="id", first=1, after=nested)


class TestOffsetPagination:
    async def test_count(self, repo, seeded_session: AsyncSession):
        assert await repo.count(seeded_session) == 3
        assert await repo.count(seeded_session, select(Item).where(Item.field == "foo")) == 2

    async def test_count_ignores_limit(self, repo, seeded_session: AsyncSession):
        assert await repo.count(seeded_session, select(Item).limit(1)) == 3

    async def test_second_page(self, repo, seeded_session: AsyncSession):
        page = await repo.paginate_offset(
            seeded_session, select(Item).order_by(Item.id), page=2, results_per_page=2
        )

        assert ids(page.results) == [3]
        assert page.result_count == 3
        assert page.page_count == 2
        assert page.current_page == 2

    async def test_page_past_the_end(self, repo, seeded_session: AsyncSession):
        page = await repo.paginate_offset(
            seeded_session, select(Item).order_by(Item.id), page=5, results_per_page=2
        )

        assert page.results == []
        assert page.result_count == 3

    async def test_empty_table(self, repo, db_session: AsyncSession):
        page = await repo.paginate_offset(db_session, results_per_page=10)

        assert page.results == []
        assert page.result_count == 0
        assert page.page_count == 0
        assert page.current_page == 1
