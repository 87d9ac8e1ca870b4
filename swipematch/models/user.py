"""
User profile document and its lazily created nested records
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from pydantic import BaseModel, Field, field_validator

from swipematch.exceptions import PoolIntegrityError
from swipematch.models.status_enums import PairState


class UserType(str, Enum):
    """Capabilities a participant signed up for"""
    DATER = "Dater"
    MATCH_MAKER = "Match Maker"
    DATER_AND_MATCH_MAKER = "Dater & Match Maker"

    @property
    def can_date(self) -> bool:
        return self in (UserType.DATER, UserType.DATER_AND_MATCH_MAKER)

    @property
    def can_matchmake(self) -> bool:
        return self in (UserType.MATCH_MAKER, UserType.DATER_AND_MATCH_MAKER)


# Spellings the onboarding screens have stored over time
USER_TYPE_ALIASES = {
    "dater": UserType.DATER,
    "match maker": UserType.MATCH_MAKER,
    "match_maker": UserType.MATCH_MAKER,
    "matchmaker": UserType.MATCH_MAKER,
    "swiper": UserType.MATCH_MAKER,
    "dater & match maker": UserType.DATER_AND_MATCH_MAKER,
    "dater & swiper": UserType.DATER_AND_MATCH_MAKER,
    "dater-swiper": UserType.DATER_AND_MATCH_MAKER,
    "both": UserType.DATER_AND_MATCH_MAKER,
}


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    NON_BINARY = "non_binary"
    OTHER = "other"


class Sexuality(str, Enum):
    STRAIGHT = "straight"
    GAY = "gay"
    LESBIAN = "lesbian"
    BISEXUAL = "bisexual"
    PANSEXUAL = "pansexual"
    ASEXUAL = "asexual"
    OTHER = "other"


def _normalize_label(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, Enum):
        value = value.value
    value = str(value).strip().lower()
    return value or None


def _parse_user_type(value: Any) -> Any:
    if value is None or isinstance(value, UserType):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        alias = USER_TYPE_ALIASES.get(value.strip().lower())
        if alias is not None:
            return alias
    return value


def is_storable_key(value: Any) -> bool:
    """Whether ``value`` can be used as a key inside a user document"""
    value = str(value)
    return bool(value) and "." not in value and not value.startswith("$")


def _unique_ids(value: Any) -> List[str]:
    """Accept user records or bare IDs, keep unique IDs in order"""
    if value is None:
        return []
    if isinstance(value, dict):
        value = list(value.keys())
    user_ids = []
    for item in value:
        user_id = (item.get("id") or item.get("userId")) if isinstance(item, dict) else item
        if user_id and str(user_id) not in user_ids:
            user_ids.append(str(user_id))
    return user_ids


class ProfileDetails(BaseModel):
    """Free-form profile shown in the profile editor and when comparing matches"""

    age: Optional[int] = Field(default=None, ge=0)
    height: Optional[str] = None  # Centimetres or feet and inches, as entered
    year: Optional[str] = None  # School year
    city: Optional[str] = None
    interests: List[str] = Field(default_factory=list)
    date_activities: List[str] = Field(default_factory=list)
    photos: List[str] = Field(default_factory=list)

    @field_validator("height", mode="before")
    @classmethod
    def height_as_text(cls, value):
        if value is None or value == "":
            return None
        return str(value)

    @field_validator("interests", "date_activities", "photos", mode="before")
    @classmethod
    def empty_list_for_none(cls, value):
        return [] if value is None else value


class SwipePool(BaseModel):
    """Undecided and decided candidates of one matchmaker for one friend"""

    pool: List[str] = Field(default_factory=list)  # Ordered, not yet swiped
    swiped_pool: List[str] = Field(default_factory=list)  # Set semantics, insertion ordered

    def mark_swiped(self, candidate_id: str) -> None:
        """Move a candidate from the undecided list to the decided set"""
        self.pool = [cid for cid in self.pool if cid != candidate_id]
        if candidate_id not in self.swiped_pool:
            self.swiped_pool.append(candidate_id)

    def has_swiped(self, candidate_id: str) -> bool:
        return candidate_id in self.swiped_pool

    def overlap(self) -> Set[str]:
        return set(self.pool) & set(self.swiped_pool)

    def assert_consistent(self, matchmaker_id: str) -> None:
        overlap = self.overlap()
        if overlap:
            raise PoolIntegrityError(matchmaker_id, list(overlap))


class MatchEntry(BaseModel):
    """Per-candidate decision ledger entry kept on the friend being matched"""

    approval_rate: float = Field(default=0.0, ge=0.0)
    match_back: bool = False
    match_id: Optional[str] = None

    @property
    def state(self) -> PairState:
        if self.match_id:
            return PairState.MATCHED
        if self.approval_rate > 0:
            return PairState.PARTIALLY_APPROVED
        return PairState.REJECTED


class UserProfile(BaseModel):
    """One participant, stored as one document keyed by ``id``"""

    id: str
    name: Optional[str] = None
    phone_number: Optional[str] = None
    user_type: Optional[UserType] = None

    # Compatibility inputs, lower-cased free text
    gender: Optional[str] = None
    sexuality: Optional[str] = None

    profile_data: ProfileDetails = Field(default_factory=ProfileDetails)

    # Social graph, stored on each side
    friends: List[str] = Field(default_factory=list)
    pending_friend_requests: List[str] = Field(default_factory=list)  # Received, not answered
    sent_friend_requests: List[str] = Field(default_factory=list)

    # Matchmaking state written by other users
    swiping_pools: Dict[str, SwipePool] = Field(default_factory=dict)
    matches: Dict[str, MatchEntry] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("gender", "sexuality", mode="before")
    @classmethod
    def lower_case_labels(cls, value):
        return _normalize_label(value)

    @field_validator("user_type", mode="before")
    @classmethod
    def accept_user_type_aliases(cls, value):
        return _parse_user_type(value)

    @field_validator("friends", "pending_friend_requests", "sent_friend_requests", mode="before")
    @classmethod
    def user_ids_only(cls, value):
        return _unique_ids(value)

    @field_validator("profile_data", mode="before")
    @classmethod
    def empty_profile_for_none(cls, value):
        return {} if value is None else value

    def is_connected_to(self, other_id: str) -> bool:
        """Friends, or a friend request pending in either direction"""
        return (
            other_id in self.friends
            or other_id in self.pending_friend_requests
            or other_id in self.sent_friend_requests
        )

    @property
    def is_dater(self) -> bool:
        return self.user_type is not None and self.user_type.can_date

    @property
    def is_matchmaker(self) -> bool:
        return self.user_type is not None and self.user_type.can_matchmake

    def swiping_pool_for(self, matchmaker_id: str) -> SwipePool:
        """Get or create the sub-pool owned by ``matchmaker_id``"""
        return self.swiping_pools.setdefault(matchmaker_id, SwipePool())

    def match_entry_for(self, other_id: str) -> MatchEntry:
        """Get or create the ledger entry for ``other_id``"""
        return self.matches.setdefault(other_id, MatchEntry())

    def pair_state(self, other_id: str) -> PairState:
        entry = self.matches.get(other_id)
        if entry is None:
            return PairState.UNDECIDED
        return entry.state


class UserProfileCreate(BaseModel):
    """Payload for first registration"""
    id: Optional[str] = None  # Auth provider ID; generated when missing
    name: str
    phone_number: Optional[str] = None
    user_type: UserType
    gender: Optional[str] = None
    sexuality: Optional[str] = None
    profile_data: Optional[ProfileDetails] = None

    @field_validator("id")
    @classmethod
    def id_usable_as_document_key(cls, value):
        # Other users' documents are keyed by this ID
        if value is not None and not is_storable_key(value):
            raise ValueError("User ID must be non-empty and may not contain '.' or start with '$'")
        return value

    @field_validator("gender", "sexuality", mode="before")
    @classmethod
    def lower_case_labels(cls, value):
        return _normalize_label(value)

    @field_validator("user_type", mode="before")
    @classmethod
    def accept_user_type_aliases(cls, value):
        return _parse_user_type(value)


class UserProfileUpdate(BaseModel):
    """Editable profile fields, all optional"""
    name: Optional[str] = None
    phone_number: Optional[str] = None
    user_type: Optional[UserType] = None
    gender: Optional[str] = None
    sexuality: Optional[str] = None
    profile_data: Optional[ProfileDetails] = None  # Only the fields sent are changed

    @field_validator("gender", "sexuality", mode="before")
    @classmethod
    def lower_case_labels(cls, value):
        return _normalize_label(value)

    @field_validator("user_type", mode="before")
    @classmethod
    def accept_user_type_aliases(cls, value):
        return _parse_user_type(value)
