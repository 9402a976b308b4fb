"""
End-to-end storage scenarios on a real SQLite database through the SQLAlchemy driver
"""
from datetime import datetime, timezone

import pytest

from app.crud.filters import Filter
from app.crud.operator import Operator
from app.models import USERS, VIDEOS
from app.schemas import Media, User
from app.schemas.user import Role
from app.services.passwords import verify_password
from app.store.driver import SQLAlchemyExecutor, SQLAlchemyQuerier, limit_offset_limiter
from app.store.errors import QueryError, ResourceNotFoundError
from app.store.sqlresource import SQLResource

T1 = datetime(2024, 5, 1, 8, 0, tzinfo=timezone.utc)
T2 = datetime(2024, 5, 1, 9, 0, tzinfo=timezone.utc)
T3 = datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)


def store_for(engine, model, descriptor):
    return SQLResource(
        model,
        SQLAlchemyQuerier(engine),
        SQLAlchemyExecutor(engine),
        descriptor.table_name,
        descriptor.filter_set,
        limit_offset_limiter,
    )


def eq(field, *values):
    return Filter(field=field, operator=Operator.EQ, values=frozenset(values))


async def seed(videos):
    await videos.post(Media(id="v1", timestamp=T1, camera="A", tags=["night", "door"]))
    await videos.post(Media(id="v2", timestamp=T2, camera="B"))
    await videos.post(Media(id="v3", timestamp=T3, camera="A"))


class TestVideoLifecycle:
    @pytest.mark.asyncio
    async def test_create_read_update_delete(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        assert await videos.post(Media(id="v1", timestamp=T1, camera="A")) == "v1"

        created = await videos.get_by_id("v1")
        assert created.camera == "A"
        assert created.timestamp == T1
        assert created.media_url is None
        assert created.created_at.tzinfo is not None

        await videos.put("v1", Media.model_validate({"media_url": "001/djE=.mp4"}))
        updated = await videos.get_by_id("v1")
        assert updated.media_url == "001/djE=.mp4"
        assert updated.camera == "A"
        assert updated.created_at == created.created_at
        assert updated.modified_at >= created.modified_at

        await videos.delete("v1")
        with pytest.raises(ResourceNotFoundError):
            await videos.get_by_id("v1")

    @pytest.mark.asyncio
    async def test_move_to_other_camera_then_delete_twice(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await videos.post(Media(id="cam1", timestamp=T1, camera="cam1"))
        await videos.post(Media(id="other", timestamp=T2, camera="cam1"))

        await videos.put("cam1", Media.model_validate({"camera": "cam2"}))
        moved = await videos.get([eq("camera", "cam2")], [], False, 0, 10)
        assert [v.id for v in moved] == ["cam1"]
        assert moved[0].camera == "cam2"
        assert moved[0].timestamp == T1

        await videos.delete("cam1")
        await videos.delete("cam1")
        assert await videos.get([eq("camera", "cam2")], [], False, 0, 10) == []
        assert [v.id for v in await videos.get([], [], False, 0, 10)] == ["other"]

    @pytest.mark.asyncio
    async def test_duplicate_id_fails_and_leaves_original(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await videos.post(Media(id="v1", timestamp=T1, camera="A"))
        with pytest.raises(QueryError):
            await videos.post(Media(id="v1", timestamp=T2, camera="B"))
        assert (await videos.get_by_id("v1")).camera == "A"

    @pytest.mark.asyncio
    async def test_update_missing_row(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        with pytest.raises(ResourceNotFoundError):
            await videos.put("nope", Media(camera="A"))

    @pytest.mark.asyncio
    async def test_clear_nullable_column(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await seed(videos)
        await videos.put("v1", Media.model_validate({"tags": None}))
        assert (await videos.get_by_id("v1")).tags is None


class TestVideoQueries:
    @pytest.mark.asyncio
    async def test_filter_or_within_field(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await seed(videos)
        found = await videos.get([eq("camera", "A")], [], True, 0, 10)
        assert [v.id for v in found] == ["v1", "v3"]
        found = await videos.get([eq("camera", "A", "B")], [], True, 0, 10)
        assert len(found) == 3

    @pytest.mark.asyncio
    async def test_filter_and_across_fields(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await seed(videos)
        after = Filter(field="timestamp", operator=Operator.GE, values=frozenset({"2024-05-01T09:00:00Z"}))
        found = await videos.get([eq("camera", "A"), after], [], True, 0, 10)
        assert [v.id for v in found] == ["v3"]

    @pytest.mark.asyncio
    async def test_timestamp_filter_honours_offset(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await seed(videos)
        before = Filter(field="timestamp", operator=Operator.LT, values=frozenset({"2024-05-01T11:00:00+02:00"}))
        found = await videos.get([before], [], True, 0, 10)
        assert [v.id for v in found] == ["v1"]

    @pytest.mark.asyncio
    async def test_null_sentinel(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await seed(videos)
        assert {v.id for v in await videos.get([eq("tags", "NULL")], [], True, 0, 10)} == {"v2", "v3"}
        not_null = Filter(field="tags", operator=Operator.NE, values=frozenset({"NULL"}))
        assert [v.id for v in await videos.get([not_null], [], True, 0, 10)] == ["v1"]

    @pytest.mark.asyncio
    async def test_tags_substring(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await seed(videos)
        like = Filter(field="tags", operator=Operator.LIKE, values=frozenset({"door"}))
        found = await videos.get([like], [], True, 0, 10)
        assert [v.id for v in found] == ["v1"]
        assert found[0].tags == ["night", "door"]

    @pytest.mark.asyncio
    async def test_sort_and_pagination(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await seed(videos)
        first = await videos.get([], ["timestamp"], False, 0, 2)
        second = await videos.get([], ["timestamp"], False, 2, 2)
        assert [v.id for v in first] == ["v3", "v2"]
        assert [v.id for v in second] == ["v1"]

    @pytest.mark.asyncio
    async def test_injection_attempt_is_just_a_value(self, sqlite_engine):
        videos = store_for(sqlite_engine, Media, VIDEOS)
        await seed(videos)
        assert await videos.get([eq("camera", "A' OR '1'='1")], [], True, 0, 10) == []
        assert len(await videos.get([], [], True, 0, 10)) == 3


class TestUserStorage:
    @pytest.mark.asyncio
    async def test_password_stored_as_hash_and_never_serialized(self, sqlite_engine):
        users = store_for(sqlite_engine, User, USERS)
        await users.post(User(id="ana", name="Ana", password="s3cret"))
        user = await users.get_by_id("ana")
        assert user.role == Role.READ_ONLY
        assert user.password != "s3cret"
        assert verify_password("s3cret", user.password)
        assert "password" not in user.model_dump()
        assert "hash" not in user.model_dump_json()

    @pytest.mark.asyncio
    async def test_password_change(self, sqlite_engine):
        users = store_for(sqlite_engine, User, USERS)
        await users.post(User(id="ana", name="Ana", password="old"))
        await users.put("ana", User(password="new"))
        user = await users.get_by_id("ana")
        assert verify_password("new", user.password)
        assert user.name == "Ana"
