"""
Error taxonomy for the dashboard.

Read paths: StoreQueryError is raised by the store and swallowed at the
read-model boundary (logged, empty result returned).

Write paths: AuthError subclasses carry a user-facing message and an HTTP
status. The auth service converts them into an AuthResult, so no exception
crosses into the API layer.

HTTP layer: BusinessError builds HTTPExceptions with generic details.
Internal details go to the log, never to the client.
"""
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)


class StoreQueryError(Exception):
    """A query against the data store failed (network, SQL, missing table)."""

    def __init__(self, relation: str, original: Exception | None = None):
        self.relation = relation
        self.original = original
        detail = f"{type(original).__name__}: {original}" if original else "query failed"
        super().__init__(f"Query on {relation} failed ({detail})")


class AuthError(Exception):
    message = "An unexpected error occurred"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


class InvalidCredentials(AuthError):
    # Same message for unknown email and wrong password
    message = "Invalid email or password"
    status_code = status.HTTP_401_UNAUTHORIZED


class DuplicateAccount(AuthError):
    message = "An account with this email already exists"
    status_code = status.HTTP_409_CONFLICT


class PersistenceError(AuthError):
    message = "Failed to create account"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class UnexpectedError(AuthError):
    message = "An unexpected error occurred"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class BusinessError:
    """HTTP exceptions with safe (non-leaky) messages."""

    @staticmethod
    def unauthorized(reason: str = "") -> HTTPException:
        """
        Generic 401 for every missing or invalid session.
        """
        if reason:
            logger.info(f"Unauthorized request: {reason}")
        return HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
