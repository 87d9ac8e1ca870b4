"""
Custom exceptions for the application
"""


class ProfileStoreError(Exception):
    """Base class for failures talking to the profile store"""

    def __init__(self, message: str, user_id: str = None, original_error: Exception = None):
        self.message = message
        self.user_id = user_id
        self.original_error = original_error
        super().__init__(message)


class ProfileNotFoundError(ProfileStoreError):
    """Raised when a user ID does not resolve to a stored profile"""

    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found", user_id=user_id)


class StoreWriteError(ProfileStoreError):
    """Raised when a read or partial update against the store fails"""


class PoolIntegrityError(Exception):
    """Raised when a candidate is both undecided and decided for the same matchmaker"""

    def __init__(self, matchmaker_id: str, candidate_ids: list):
        self.matchmaker_id = matchmaker_id
        self.candidate_ids = candidate_ids
        super().__init__(
            f"Candidates {sorted(candidate_ids)} present in both pool and swiped pool of matchmaker {matchmaker_id}"
        )
