class UserServiceException(Exception):
    """Base exception for the user service."""


class ConfigurationError(UserServiceException):
    """Exception raised when the environment produces an invalid configuration."""


# Database exceptions
class DatabaseException(UserServiceException):
    """Base exception for database-related errors."""


class DatabaseConnectionError(DatabaseException):
    """Exception raised when the database cannot be reached at startup."""


class UserNotFoundError(DatabaseException):
    """Exception raised when a user id does not match any row."""

    def __init__(self, user_id: object):
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id
