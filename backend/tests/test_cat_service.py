"""
CatVote Backend: Cat Service Unit Tests
=======================================

What:  Tests for CatService (aggregation, seeding, bulk clear).
How:   Real SQLite store on a temp file for query behavior; mock sessions for
       the error paths.

What we test:
    ✅ Counts per cat, zero-vote cats included
    ✅ Ordering: upvotes descending, id ascending on ties
    ✅ Seeding is idempotent by external id and reports exact inserts
    ✅ clear_all empties every table
    ✅ Store failures surface as DatabaseError
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError

from catvote.exceptions import DatabaseError
from catvote.models import Cat, MonthlyWinner, Vote, VoteType
from catvote.schemas.cat import SeedCat
from catvote.services.cat_service import CatService


async def add_cat(db, url: str, external_id: str = None) -> Cat:
    cat = Cat(image_url=url, external_id=external_id)
    db.add(cat)
    await db.flush()
    return cat


async def add_votes(db, cat: Cat, vote_type: VoteType, count: int) -> None:
    for _ in range(count):
        db.add(Vote(cat_id=cat.id, vote_type=vote_type.value))
    await db.flush()


async def count_rows(db, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestListCats:

    def setup_method(self):
        self.service = CatService()

    @pytest.mark.asyncio
    async def test_empty_store_returns_empty_list(self, db_session):
        assert await self.service.list_cats(db_session) == []

    @pytest.mark.asyncio
    async def test_counts_and_cats_without_votes(self, db_session):
        """Every cat appears once; cats without votes report 0 and 0."""
        popular = await add_cat(db_session, "https://img/1.jpg")
        ignored = await add_cat(db_session, "https://img/2.jpg")
        disliked = await add_cat(db_session, "https://img/3.jpg")
        await add_votes(db_session, popular, VoteType.UPVOTE, 2)
        await add_votes(db_session, popular, VoteType.DOWNVOTE, 1)
        await add_votes(db_session, disliked, VoteType.DOWNVOTE, 3)

        cats = await self.service.list_cats(db_session)

        assert [(c.id, c.upvotes, c.downvotes) for c in cats] == [
            (popular.id, 2, 1),
            (ignored.id, 0, 0),
            (disliked.id, 0, 3),
        ]
        assert cats[0].image_url == "https://img/1.jpg"

    @pytest.mark.asyncio
    async def test_ties_are_ordered_by_id(self, db_session):
        first = await add_cat(db_session, "https://img/a.jpg")
        second = await add_cat(db_session, "https://img/b.jpg")
        await add_votes(db_session, second, VoteType.UPVOTE, 1)
        await add_votes(db_session, first, VoteType.UPVOTE, 1)

        cats = await self.service.list_cats(db_session)

        assert [c.id for c in cats] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_database_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("disk I/O error")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.list_cats(mock_db_session)

        assert exc_info.value.message == "Failed to fetch cats"
        assert exc_info.value.context["error_type"] == "SQLAlchemyError"


class TestSeedCats:

    def setup_method(self):
        self.service = CatService()

    @pytest.mark.asyncio
    async def test_inserts_every_new_record(self, db_session):
        cats = [SeedCat(id="a1", url="https://img/a1.jpg"), SeedCat(id="b2", url="https://img/b2.jpg")]

        inserted = await self.service.seed_cats(db_session, cats)

        assert inserted == 2
        assert await count_rows(db_session, Cat) == 2

    @pytest.mark.asyncio
    async def test_reseeding_same_batch_is_a_no_op(self, db_session):
        cats = [SeedCat(id="a1", url="https://img/a1.jpg"), SeedCat(id="b2", url="https://img/b2.jpg")]
        await self.service.seed_cats(db_session, cats)

        inserted = await self.service.seed_cats(db_session, cats)

        assert inserted == 0
        assert await count_rows(db_session, Cat) == 2

    @pytest.mark.asyncio
    async def test_partial_overlap_counts_only_new_rows(self, db_session):
        await self.service.seed_cats(db_session, [SeedCat(id="a1", url="https://img/a1.jpg")])

        inserted = await self.service.seed_cats(
            db_session,
            [SeedCat(id="a1", url="https://img/other.jpg"), SeedCat(id="c3", url="https://img/c3.jpg")],
        )

        assert inserted == 1
        result = await db_session.execute(select(Cat.image_url).where(Cat.external_id == "a1"))
        # The existing row is not overwritten
        assert result.scalar_one() == "https://img/a1.jpg"

    @pytest.mark.asyncio
    async def test_duplicate_inside_one_batch_is_inserted_once(self, db_session):
        cats = [SeedCat(id="dup", url="https://img/1.jpg"), SeedCat(id="dup", url="https://img/2.jpg")]

        assert await self.service.seed_cats(db_session, cats) == 1

    @pytest.mark.asyncio
    async def test_failing_record_rolls_back_to_its_savepoint(self, db_session):
        """Records before and after a rejected insert are all kept."""
        await db_session.execute(text(
            "CREATE TRIGGER reject_bad_cat BEFORE INSERT ON cats "
            "WHEN NEW.external_id = 'bad' "
            "BEGIN SELECT RAISE(ABORT, 'rejected'); END"
        ))

        inserted = await self.service.seed_cats(
            db_session,
            [
                SeedCat(id="first", url="https://img/first.jpg"),
                SeedCat(id="bad", url="https://img/bad.jpg"),
                SeedCat(id="last", url="https://img/last.jpg"),
            ],
        )

        assert inserted == 2
        result = await db_session.execute(select(Cat.external_id).order_by(Cat.id))
        assert result.scalars().all() == ["first", "last"]

    @pytest.mark.asyncio
    async def test_failing_record_is_skipped(self, mock_db_session):
        """A store error on one record is logged; the batch continues."""
        ok_result = type("Result", (), {"rowcount": 1})()
        mock_db_session.execute.side_effect = [SQLAlchemyError("locked"), ok_result]
        mock_db_session.begin_nested = MagicMock()
        nested = mock_db_session.begin_nested.return_value
        nested.__aenter__.return_value = None
        nested.__aexit__.return_value = False

        inserted = await self.service.seed_cats(
            mock_db_session,
            [SeedCat(id="bad", url="https://img/bad.jpg"), SeedCat(id="good", url="https://img/good.jpg")],
        )

        assert inserted == 1
        assert mock_db_session.execute.await_count == 2


class TestClearAll:

    def setup_method(self):
        self.service = CatService()

    @pytest.mark.asyncio
    async def test_removes_votes_winners_and_cats(self, db_session):
        cat = await add_cat(db_session, "https://img/1.jpg", external_id="one")
        await add_votes(db_session, cat, VoteType.UPVOTE, 2)
        db_session.add(MonthlyWinner(cat_id=cat.id, month_year="2025-01", upvote_count=2))
        await db_session.flush()

        await self.service.clear_all(db_session)

        assert await count_rows(db_session, Vote) == 0
        assert await count_rows(db_session, MonthlyWinner) == 0
        assert await count_rows(db_session, Cat) == 0

    @pytest.mark.asyncio
    async def test_clear_on_empty_store_succeeds(self, db_session):
        await self.service.clear_all(db_session)
        assert await self.service.list_cats(db_session) == []

    @pytest.mark.asyncio
    async def test_database_failure_raises_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = SQLAlchemyError("database is locked")

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.clear_all(mock_db_session)

        assert exc_info.value.message == "Failed to clear database"
