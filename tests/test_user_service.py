"""
Unit tests for UserService
"""

import pytest

from swipematch.exceptions import ProfileNotFoundError, StoreWriteError
from swipematch.models.user import ProfileDetails, UserProfileCreate, UserProfileUpdate, UserType
from swipematch.services.user_service import UserService
from tests.test_utils import make_user, seed_store


class TestUserService:
    """Test class for UserService"""

    @pytest.fixture
    async def seeded(self, store):
        return await seed_store(
            store,
            make_user("sarah", gender="female", sexuality="straight", phone_number="+15551234567"),
            make_user("john", user_type=UserType.DATER_AND_MATCH_MAKER, phone_number="+15551234568"),
            make_user("mike", user_type=UserType.MATCH_MAKER),
            make_user("liz", user_type=UserType.MATCH_MAKER),
        )

    @pytest.fixture
    def service(self, seeded):
        return UserService(seeded)

    @pytest.mark.asyncio
    async def test_register_user(self, service, seeded):
        user_data = UserProfileCreate(
            id="david",
            name="David Rodriguez",
            phone_number="+15551234570",
            user_type="Dater",
            gender="Male",
            sexuality="Straight",
        )

        result = await service.register_user(user_data)

        assert result.id == "david"
        stored = await seeded.get("david")
        assert stored.gender == "male"
        assert stored.sexuality == "straight"
        assert stored.user_type == UserType.DATER
        assert stored.friends == []
        assert stored.matches == {}

    @pytest.mark.asyncio
    async def test_register_user_generates_id(self, service):
        result = await service.register_user(UserProfileCreate(name="New User", user_type="both"))

        assert result.id
        assert result.user_type == UserType.DATER_AND_MATCH_MAKER

    @pytest.mark.asyncio
    async def test_register_existing_user_fails(self, service):
        with pytest.raises(StoreWriteError):
            await service.register_user(UserProfileCreate(id="sarah", name="Sarah", user_type="Dater"))

    @pytest.mark.asyncio
    async def test_find_by_phone(self, service):
        result = await service.find_by_phone("+15551234568")

        assert result.id == "john"
        assert await service.find_by_phone("+10000000000") is None

    @pytest.mark.asyncio
    async def test_update_profile_only_changes_given_fields(self, service):
        result = await service.update_profile("sarah", UserProfileUpdate(sexuality="Bisexual"))

        assert result.sexuality == "bisexual"
        assert result.gender == "female"
        assert result.phone_number == "+15551234567"

    @pytest.mark.asyncio
    async def test_update_missing_user(self, service):
        with pytest.raises(ProfileNotFoundError):
            await service.update_profile("nobody", UserProfileUpdate(name="x"))

    @pytest.mark.asyncio
    async def test_add_friend_stores_both_sides(self, service, seeded):
        assert await service.add_friend("sarah", "john") is True

        assert (await seeded.get("sarah")).friends == ["john"]
        assert (await seeded.get("john")).friends == ["sarah"]

    @pytest.mark.asyncio
    async def test_add_friend_twice_is_noop(self, service):
        await service.add_friend("sarah", "john")

        assert await service.add_friend("john", "sarah") is False

    @pytest.mark.asyncio
    async def test_add_self_as_friend(self, service):
        with pytest.raises(ValueError):
            await service.add_friend("sarah", "sarah")

    @pytest.mark.asyncio
    async def test_add_unknown_friend(self, service, seeded):
        with pytest.raises(ProfileNotFoundError):
            await service.add_friend("sarah", "nobody")

        assert (await seeded.get("sarah")).friends == []

    @pytest.mark.asyncio
    async def test_remove_friend(self, service, seeded):
        await service.add_friend("sarah", "john")

        assert await service.remove_friend("john", "sarah") is True
        assert (await seeded.get("sarah")).friends == []
        assert (await seeded.get("john")).friends == []
        assert await service.remove_friend("john", "sarah") is False

    @pytest.mark.asyncio
    async def test_remove_dangling_friend(self, service, seeded):
        await seeded.merge("sarah", {"friends": ["ghost"]})

        assert await service.remove_friend("sarah", "ghost") is True
        assert (await seeded.get("sarah")).friends == []

    @pytest.mark.asyncio
    async def test_get_matchmaker_friends(self, service, seeded):
        await service.add_friend("john", "sarah")
        await service.add_friend("john", "mike")
        await seeded.merge("john", {"friends": ["sarah", "mike", "ghost"]})

        result = await service.get_matchmaker_friends("john")

        assert [user.id for user in result] == ["sarah"]

    @pytest.mark.asyncio
    async def test_plain_dater_has_no_matchmaker_friends(self, service):
        await service.add_friend("sarah", "john")

        assert await service.get_matchmaker_friends("sarah") == []

    @pytest.mark.asyncio
    async def test_register_user_with_profile_details(self, service):
        user_data = UserProfileCreate(
            id="james",
            name="James Wilson",
            user_type="Dater",
            profile_data=ProfileDetails(age=27, interests=["Fitness", "Travel"]),
        )

        result = await service.register_user(user_data)

        assert result.profile_data.age == 27
        assert result.profile_data.interests == ["Fitness", "Travel"]

    @pytest.mark.asyncio
    async def test_update_profile_details_keeps_other_details(self, service):
        await service.update_profile("sarah", UserProfileUpdate(profile_data=ProfileDetails(age=25, year="Senior")))

        result = await service.update_profile("sarah", UserProfileUpdate(profile_data={"city": "Stanford"}))

        assert result.profile_data.city == "Stanford"
        assert result.profile_data.age == 25
        assert result.profile_data.year == "Senior"
        assert result.gender == "female"


class TestFriendRequests:
    """Friend request flow and suggestions"""

    @pytest.fixture
    async def seeded(self, store):
        return await seed_store(
            store,
            make_user("sarah"),
            make_user("john", user_type=UserType.DATER_AND_MATCH_MAKER),
            make_user("mike", user_type=UserType.MATCH_MAKER),
            make_user("liz", user_type=UserType.MATCH_MAKER),
        )

    @pytest.fixture
    def service(self, seeded):
        return UserService(seeded)

    @pytest.mark.asyncio
    async def test_send_request_is_stored_on_both_sides(self, service, seeded):
        assert await service.send_friend_request("sarah", "john") is True

        assert (await seeded.get("sarah")).sent_friend_requests == ["john"]
        assert (await seeded.get("john")).pending_friend_requests == ["sarah"]

    @pytest.mark.asyncio
    async def test_duplicate_or_crossing_request_is_not_sent(self, service, seeded):
        await service.send_friend_request("sarah", "john")

        assert await service.send_friend_request("sarah", "john") is False
        assert await service.send_friend_request("john", "sarah") is False
        assert (await seeded.get("john")).sent_friend_requests == []

    @pytest.mark.asyncio
    async def test_request_to_friend_is_not_sent(self, service):
        await service.add_friend("sarah", "john")

        assert await service.send_friend_request("sarah", "john") is False

    @pytest.mark.asyncio
    async def test_request_to_self(self, service):
        with pytest.raises(ValueError):
            await service.send_friend_request("sarah", "sarah")

    @pytest.mark.asyncio
    async def test_request_to_unknown_user(self, service, seeded):
        with pytest.raises(ProfileNotFoundError):
            await service.send_friend_request("sarah", "nobody")

        assert (await seeded.get("sarah")).sent_friend_requests == []

    @pytest.mark.asyncio
    async def test_accept_makes_both_friends(self, service, seeded):
        await service.send_friend_request("sarah", "john")

        assert await service.accept_friend_request("john", "sarah") is True

        sarah = await seeded.get("sarah")
        john = await seeded.get("john")
        assert sarah.friends == ["john"]
        assert john.friends == ["sarah"]
        assert sarah.sent_friend_requests == []
        assert john.pending_friend_requests == []

    @pytest.mark.asyncio
    async def test_accept_without_request(self, service, seeded):
        assert await service.accept_friend_request("john", "sarah") is False
        assert (await seeded.get("john")).friends == []

    @pytest.mark.asyncio
    async def test_reject_clears_request_only(self, service, seeded):
        await service.send_friend_request("sarah", "john")

        assert await service.reject_friend_request("john", "sarah") is True
        assert await service.reject_friend_request("john", "sarah") is False

        sarah = await seeded.get("sarah")
        john = await seeded.get("john")
        assert sarah.friends == [] and john.friends == []
        assert sarah.sent_friend_requests == []
        assert john.pending_friend_requests == []

    @pytest.mark.asyncio
    async def test_suggestions_exclude_self_friends_and_requests(self, service):
        await service.add_friend("sarah", "john")
        await service.send_friend_request("sarah", "mike")

        suggestions = await service.get_friend_suggestions("sarah")

        assert [user.id for user in suggestions] == ["liz"]
        assert [user.id for user in await service.get_friend_suggestions("mike")] == ["john", "liz"]

    @pytest.mark.asyncio
    async def test_suggestions_are_limited(self, service, seeded):
        for index in range(12):
            await seeded.create(make_user(f"user{index:02d}"))

        suggestions = await service.get_friend_suggestions("sarah")

        assert len(suggestions) == 10
        assert [user.id for user in suggestions][:3] == ["john", "liz", "mike"]
