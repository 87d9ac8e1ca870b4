"""
Unit tests for the in-memory profile store and patch helpers
"""

import pytest
from pydantic import ValidationError

from swipematch.exceptions import ProfileNotFoundError, ProfileStoreError, StoreWriteError
from swipematch.models.user import MatchEntry, SwipePool
from swipematch.services.profile_store import InMemoryProfileStore, field_path, prepare_patch
from tests.test_utils import make_user, seed_store


class TestFieldPath:
    """Dotted path construction"""

    def test_joins_segments(self):
        assert field_path("matches", "abc", "match_id") == "matches.abc.match_id"

    @pytest.mark.parametrize("segment", ["", "a.b", "$set"])
    def test_rejects_unsafe_segments(self, segment):
        with pytest.raises(ValueError):
            field_path("matches", segment)

    def test_prepare_patch_dumps_models_and_stamps_time(self):
        prepared = prepare_patch({"matches.abc": MatchEntry(approval_rate=0.5)})

        assert prepared["matches.abc"] == {"approval_rate": 0.5, "match_back": False, "match_id": None}
        assert "updated_at" in prepared

    def test_prepare_patch_rejects_operator_keys(self):
        with pytest.raises(ValueError):
            prepare_patch({"matches.$where": 1})


class TestInMemoryProfileStore:
    """Test class for InMemoryProfileStore"""

    @pytest.fixture
    async def seeded(self, store):
        return await seed_store(
            store,
            make_user("a", phone_number="+15550000001", matches={"x": MatchEntry(approval_rate=0.5)}),
            make_user("b", phone_number="+15550000002"),
        )

    @pytest.mark.asyncio
    async def test_get_missing_raises(self, store):
        with pytest.raises(ProfileNotFoundError):
            await store.get("missing")

    @pytest.mark.asyncio
    async def test_merge_keeps_sibling_fields(self, seeded):
        await seeded.merge("a", {"matches.y": MatchEntry(approval_rate=1.0)})
        await seeded.merge("a", {"matches.x.match_id": "a_x_1"})

        stored = await seeded.get("a")
        assert stored.matches["x"] == MatchEntry(approval_rate=0.5, match_id="a_x_1")
        assert stored.matches["y"].approval_rate == 1.0
        assert stored.phone_number == "+15550000001"

    @pytest.mark.asyncio
    async def test_merge_creates_nested_records(self, seeded):
        await seeded.merge("b", {"swiping_pools.mm": SwipePool(pool=["a"])})

        stored = await seeded.get("b")
        assert stored.swiping_pools["mm"].pool == ["a"]

    @pytest.mark.asyncio
    async def test_merge_missing_user_raises(self, store):
        with pytest.raises(ProfileNotFoundError):
            await store.merge("missing", {"name": "x"})

    @pytest.mark.asyncio
    async def test_merge_through_scalar_raises(self, seeded):
        with pytest.raises(StoreWriteError):
            await seeded.merge("a", {"name.first": "x"})

    @pytest.mark.asyncio
    async def test_returned_profiles_are_copies(self, seeded):
        profile = await seeded.get("a")
        profile.matches["x"].approval_rate = 0.9

        assert (await seeded.get("a")).matches["x"].approval_rate == 0.5

    @pytest.mark.asyncio
    async def test_query_by_field(self, seeded):
        result = await seeded.query("phone_number", "+15550000002")

        assert [user.id for user in result] == ["b"]

    @pytest.mark.asyncio
    async def test_create_duplicate_raises(self, seeded):
        with pytest.raises(StoreWriteError):
            await seeded.create(make_user("a"))

    @pytest.mark.asyncio
    async def test_merge_many_is_sequential(self, seeded):
        await seeded.merge_many({"a": {"name": "A"}, "b": {"name": "B"}})

        assert (await seeded.get("a")).name == "A"
        assert (await seeded.get("b")).name == "B"

    @pytest.mark.asyncio
    async def test_accepts_raw_documents(self):
        store = InMemoryProfileStore([{"_id": "a", "user_type": "dater-swiper", "friends": [{"id": "b"}]}])

        profile = await store.get("a")

        assert profile.is_dater and profile.is_matchmaker
        assert profile.friends == ["b"]

    @pytest.mark.asyncio
    async def test_invalid_document_raises_store_error(self):
        store = InMemoryProfileStore([{"_id": "c", "user_type": "Admin"}])

        with pytest.raises(ProfileStoreError) as exc_info:
            await store.get("c")

        assert exc_info.value.user_id == "c"
        assert isinstance(exc_info.value.original_error, ValidationError)

    @pytest.mark.asyncio
    async def test_scans_skip_invalid_documents(self):
        store = InMemoryProfileStore([{"_id": "a", "user_type": "Dater"}, {"_id": "c", "user_type": "Admin"}])

        assert [user.id for user in await store.list_all()] == ["a"]
        assert await store.query("user_type", "Admin") == []
