"""
Profile store: one document per user, addressed by user ID.

Matchmaking code never holds mutable references to another user's
document. Every write goes through ``merge`` with a patch of dotted
field paths (``matches.<candidate_id>.match_id``), so a matchmaker can
update a friend's or a candidate's record without clobbering fields
written concurrently by somebody else.
"""

import copy
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ValidationError
from pymongo.errors import DuplicateKeyError, PyMongoError

from swipematch.core.config import settings
from swipematch.db.mongodb import mongodb
from swipematch.exceptions import ProfileNotFoundError, ProfileStoreError, StoreWriteError
from swipematch.models.user import UserProfile, is_storable_key

logger = logging.getLogger(__name__)


def field_path(*segments: str) -> str:
    """Join path segments into a dotted field path, rejecting unsafe keys"""
    for segment in segments:
        if not is_storable_key(segment):
            raise ValueError(f"Invalid field path segment: {segment!r}")
    return ".".join(str(segment) for segment in segments)


def prepare_patch(patch: Dict[str, Any]) -> Dict[str, Any]:
    """Validate paths, dump models and stamp ``updated_at``"""
    prepared = {}
    for path, value in patch.items():
        field_path(*path.split("."))
        if isinstance(value, BaseModel):
            value = value.model_dump()
        prepared[path] = value
    prepared.setdefault("updated_at", datetime.now(timezone.utc))
    return prepared


def profile_to_document(profile: UserProfile) -> Dict[str, Any]:
    doc = profile.model_dump(exclude={"id"})
    doc["_id"] = profile.id
    return doc


def document_to_profile(doc: Dict[str, Any]) -> UserProfile:
    doc = dict(doc)
    doc["id"] = str(doc.pop("_id", doc.get("id")))
    return UserProfile(**doc)


def load_profile(user_id: str, doc: Dict[str, Any]) -> UserProfile:
    """Parse a stored document, reporting invalid ones as store errors"""
    try:
        return document_to_profile(doc)
    except ValidationError as e:
        logger.error("Stored profile of user %s is invalid: %s", user_id, e)
        raise ProfileStoreError(f"User {user_id} has an invalid profile", user_id=user_id, original_error=e) from e


class ProfileStore(ABC):
    """Minimal document store contract used by the matchmaking engine"""

    @abstractmethod
    async def get(self, user_id: str) -> UserProfile:
        """Load one profile, raising ProfileNotFoundError when absent"""

    @abstractmethod
    async def query(self, field: str, value: Any) -> List[UserProfile]:
        """Profiles whose ``field`` equals ``value``"""

    @abstractmethod
    async def merge(self, user_id: str, patch: Dict[str, Any]) -> None:
        """Partial update; fields not named in ``patch`` are left untouched"""

    @abstractmethod
    async def list_all(self) -> List[UserProfile]:
        """Every stored profile"""

    @abstractmethod
    async def create(self, profile: UserProfile) -> UserProfile:
        """Insert a new profile"""

    async def merge_many(self, patches: Dict[str, Dict[str, Any]]) -> None:
        """Apply several merges in order; earlier writes are not rolled back"""
        for user_id, patch in patches.items():
            await self.merge(user_id, patch)

    async def ping(self) -> bool:
        return True


class InMemoryProfileStore(ProfileStore):
    """Process-local store with the same merge semantics as the Mongo store"""

    def __init__(self, documents: Optional[Iterable[Dict[str, Any]]] = None):
        self._documents: Dict[str, Dict[str, Any]] = {}
        for doc in documents or []:
            doc = copy.deepcopy(doc)
            user_id = str(doc.pop("_id", None) or doc.pop("id"))
            self._documents[user_id] = doc

    @staticmethod
    def _lookup(doc: Dict[str, Any], path: str) -> Any:
        value: Any = doc
        for segment in path.split("."):
            if not isinstance(value, dict) or segment not in value:
                return None
            value = value[segment]
        return value

    @staticmethod
    def _assign(doc: Dict[str, Any], path: str, value: Any) -> None:
        *parents, leaf = path.split(".")
        target = doc
        for segment in parents:
            child = target.setdefault(segment, {})
            if not isinstance(child, dict):
                raise StoreWriteError(f"Cannot create field '{segment}' inside a non-document value")
            target = child
        target[leaf] = value

    def _to_profile(self, user_id: str, doc: Dict[str, Any]) -> UserProfile:
        return load_profile(user_id, {"_id": user_id, **copy.deepcopy(doc)})

    def _valid_profiles(self, items) -> List[UserProfile]:
        profiles = []
        for user_id, doc in items:
            try:
                profiles.append(self._to_profile(user_id, doc))
            except ProfileStoreError:
                logger.warning("Skipping user %s with invalid profile", user_id)
        return profiles

    async def get(self, user_id: str) -> UserProfile:
        doc = self._documents.get(user_id)
        if doc is None:
            raise ProfileNotFoundError(user_id)
        return self._to_profile(user_id, doc)

    async def query(self, field: str, value: Any) -> List[UserProfile]:
        return self._valid_profiles(
            (user_id, doc) for user_id, doc in self._documents.items() if self._lookup(doc, field) == value
        )

    async def merge(self, user_id: str, patch: Dict[str, Any]) -> None:
        doc = self._documents.get(user_id)
        if doc is None:
            raise ProfileNotFoundError(user_id)
        for path, value in prepare_patch(patch).items():
            self._assign(doc, path, copy.deepcopy(value))

    async def list_all(self) -> List[UserProfile]:
        return self._valid_profiles(self._documents.items())

    async def create(self, profile: UserProfile) -> UserProfile:
        if profile.id in self._documents:
            raise StoreWriteError(f"User {profile.id} already exists", user_id=profile.id)
        doc = profile_to_document(profile)
        doc.pop("_id")
        self._documents[profile.id] = doc
        return profile


class MongoProfileStore(ProfileStore):
    """Profile store backed by the users collection"""

    def _collection(self):
        return mongodb.get_users_collection()

    async def get(self, user_id: str) -> UserProfile:
        try:
            doc = await self._collection().find_one({"_id": user_id})
        except PyMongoError as e:
            logger.error("Error loading user %s: %s", user_id, e)
            raise ProfileStoreError(f"Failed to load user {user_id}", user_id=user_id, original_error=e) from e

        if not doc:
            raise ProfileNotFoundError(user_id)
        return load_profile(user_id, doc)

    async def _find(self, query: Dict[str, Any]) -> List[UserProfile]:
        profiles = []
        try:
            async for doc in self._collection().find(query):
                try:
                    profiles.append(document_to_profile(doc))
                except ValidationError as e:
                    # Legacy or hand-edited documents
                    logger.warning("Skipping user %s with invalid profile: %s", doc.get("_id"), e)
        except PyMongoError as e:
            logger.error("Error querying users %s: %s", query, e)
            raise ProfileStoreError("Failed to query users", original_error=e) from e
        return profiles

    async def query(self, field: str, value: Any) -> List[UserProfile]:
        return await self._find({field: value})

    async def list_all(self) -> List[UserProfile]:
        return await self._find({})

    async def merge(self, user_id: str, patch: Dict[str, Any]) -> None:
        try:
            result = await self._collection().update_one({"_id": user_id}, {"$set": prepare_patch(patch)})
        except PyMongoError as e:
            logger.error("Error updating user %s: %s", user_id, e)
            raise StoreWriteError(f"Failed to update user {user_id}", user_id=user_id, original_error=e) from e

        if result.matched_count == 0:
            raise ProfileNotFoundError(user_id)

    async def merge_many(self, patches: Dict[str, Dict[str, Any]]) -> None:
        if not settings.TRANSACTIONAL_MATCH_WRITES:
            return await super().merge_many(patches)

        collection = self._collection()
        try:
            async with await mongodb.client.start_session() as session:
                async with session.start_transaction():
                    for user_id, patch in patches.items():
                        result = await collection.update_one(
                            {"_id": user_id}, {"$set": prepare_patch(patch)}, session=session
                        )
                        if result.matched_count == 0:
                            raise ProfileNotFoundError(user_id)
        except PyMongoError as e:
            logger.error("Error in transactional update of users %s: %s", list(patches), e)
            raise StoreWriteError("Transactional update failed", original_error=e) from e

    async def create(self, profile: UserProfile) -> UserProfile:
        try:
            await self._collection().insert_one(profile_to_document(profile))
        except DuplicateKeyError as e:
            raise StoreWriteError(f"User {profile.id} already exists", user_id=profile.id, original_error=e) from e
        except PyMongoError as e:
            logger.error("Error creating user %s: %s", profile.id, e)
            raise StoreWriteError(f"Failed to create user {profile.id}", user_id=profile.id, original_error=e) from e
        return profile

    async def ping(self) -> bool:
        try:
            await mongodb.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error("MongoDB ping failed: %s", e)
            return False
