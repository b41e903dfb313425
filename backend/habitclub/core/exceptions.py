"""
Custom Exceptions - Application-specific error types
"""


class HabitClubException(Exception):
    """Base exception for all habit club errors"""
    pass


# ----------------------------------------------------------------------------
# Input validation
# ----------------------------------------------------------------------------

class ValidationError(HabitClubException):
    """Raised when input is malformed or missing"""
    pass


class InvalidHabitDataError(ValidationError):
    """Raised when habit data validation fails"""
    pass


class SearchTermTooShortError(ValidationError):
    """Raised when a user search term is below the minimum length"""
    pass


class InvalidSearchTermError(ValidationError):
    """Raised when a user search term contains a reserved wildcard character"""
    pass


class InvalidUsernameError(ValidationError):
    """Raised when a username fails validation"""
    pass


# ----------------------------------------------------------------------------
# Uniqueness
# ----------------------------------------------------------------------------

class DuplicateError(HabitClubException):
    """Raised when a write collides with a uniqueness rule"""
    pass


class DuplicateHabitError(DuplicateError):
    """Raised when attempting to create a duplicate habit"""
    pass


class UsernameTakenError(DuplicateError):
    """Raised when a username is already registered"""
    pass


# ----------------------------------------------------------------------------
# Missing records
# ----------------------------------------------------------------------------

class NotFoundError(HabitClubException):
    """Raised when a referenced record does not exist"""
    pass


class HabitNotFoundError(NotFoundError):
    """Raised when a habit cannot be found"""
    pass


class UserNotFoundError(NotFoundError):
    """Raised when a user profile cannot be found"""
    pass


# ----------------------------------------------------------------------------
# Forbidden operations
# ----------------------------------------------------------------------------

class InvalidOperationError(HabitClubException):
    """Raised when an operation is not allowed"""
    pass


class SelfFollowError(InvalidOperationError):
    """Raised when a user tries to follow themselves"""
    pass


# ----------------------------------------------------------------------------
# Check-in partial failures
# ----------------------------------------------------------------------------

class PartialCheckInError(HabitClubException):
    """
    Raised when the check-in event was recorded but the habit's streak
    could not be updated. The recorded event is available as `check_in`.
    """

    def __init__(self, message: str, check_in=None):
        super().__init__(message)
        self.check_in = check_in


class HabitNotFoundAfterCheckInError(PartialCheckInError, HabitNotFoundError):
    """Raised when the habit is missing after its check-in was recorded"""
    pass


class StreakConflictError(PartialCheckInError):
    """Raised when concurrent writers kept invalidating the streak update"""
    pass


# ----------------------------------------------------------------------------
# Backing store
# ----------------------------------------------------------------------------

class UpstreamError(HabitClubException):
    """Raised when the backing service fails"""
    pass


class DatabaseError(UpstreamError):
    """Raised when database operations fail"""
    pass


class StoreTimeoutError(UpstreamError, TimeoutError):
    """Raised when a database call exceeds its timeout"""
    pass
