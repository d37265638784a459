"""
Email/password authentication against the users relation.

Every public method returns an AuthResult; failures carry a user-facing
message and never raise into the caller.

Session model: login() is the local client's sign-in. It is written to the
identity cache, and restore() trusts that cache on the next start without
asking the store again. HTTP clients use authenticate() instead and carry
their own signed session token (see pharmadash.api.deps). Register never
signs the caller in.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from pharmadash.core.audit import AuditLog
from pharmadash.core.exceptions import (
    AuthError,
    DuplicateAccount,
    InvalidCredentials,
    PersistenceError,
    StoreQueryError,
    UnexpectedError,
)
from pharmadash.core.security import get_password_hash, verify_password
from pharmadash.db.store import PharmacyStore
from pharmadash.models.user import User
from pharmadash.schemas.user import AuthResult, PublicIdentity
from pharmadash.services.identity_cache import IdentityCache

logger = logging.getLogger(__name__)


@dataclass
class AuthSession:
    """The signed-in identity, passed explicitly to whatever needs it."""
    identity: Optional[PublicIdentity] = None

    @property
    def is_authenticated(self) -> bool:
        return self.identity is not None


class AuthService:
    def __init__(self, store: PharmacyStore, cache: IdentityCache, rounds: Optional[int] = None):
        self.store = store
        self.cache = cache
        self.rounds = rounds
        self.session = AuthSession()

    def restore(self) -> AuthSession:
        """Load the cached identity (if any). Not re-validated against the store."""
        identity = self.cache.load()
        self.session.identity = identity
        if identity is not None:
            AuditLog.log_session_restored(identity.id, identity.email, source=str(self.cache.path))
        return self.session

    def authenticate(self, email: str, password: str) -> AuthResult:
        """Check credentials without touching the local session or cache (HTTP clients)."""
        try:
            identity = self._authenticate(email, password)
        except AuthError as e:
            AuditLog.log_authentication("login", email, False, reason=type(e).__name__)
            return AuthResult.failed(e)
        except Exception as e:
            logger.error(f"Login error: {type(e).__name__}: {e}", exc_info=True)
            return AuthResult.failed(UnexpectedError())

        AuditLog.log_authentication("login", email, True)
        return AuthResult.ok(identity)

    def login(self, email: str, password: str) -> AuthResult:
        result = self.authenticate(email, password)
        if result.success:
            self.session.identity = result.user
            self.cache.save(result.user)
        return result

    def identity_for(self, user_id: int) -> Optional[PublicIdentity]:
        """Current public identity of a user id carried by a session token, or None."""
        try:
            with self.store.session("users") as db:
                user = db.get(User, user_id)
                return PublicIdentity.model_validate(user) if user is not None else None
        except StoreQueryError as e:
            logger.error(f"Session lookup failed: {e}")
            return None

    def sign_out(self, identity: PublicIdentity) -> AuthResult:
        """End an HTTP client's session. The local session and cache are untouched."""
        AuditLog.log_authentication("logout", identity.email, True)
        return AuthResult.ok()

    def register(self, email: str, password: str) -> AuthResult:
        try:
            identity = self._create_account(email, password)
        except AuthError as e:
            AuditLog.log_authentication("register", email, False, reason=type(e).__name__)
            return AuthResult.failed(e)
        except Exception as e:
            logger.error(f"Registration error: {type(e).__name__}: {e}", exc_info=True)
            return AuthResult.failed(UnexpectedError())

        AuditLog.log_authentication("register", email, True)
        logger.info(f"Registered user {identity.id}")
        return AuthResult.ok()

    def logout(self) -> AuthResult:
        email = self.session.identity.email if self.session.identity else ""
        self.session.identity = None
        self.cache.clear()
        AuditLog.log_authentication("logout", email, True)
        return AuthResult.ok()

    def _authenticate(self, email: str, password: str) -> PublicIdentity:
        try:
            with self.store.session("users") as db:
                user = db.query(User).filter(User.email == email).first()
                if user is None:
                    raise InvalidCredentials()
                if not verify_password(password, user.hashed_password):
                    raise InvalidCredentials()

                user.updated_at = datetime.now()
                db.commit()
                return PublicIdentity.model_validate(user)
        except StoreQueryError as e:
            logger.error(f"Login lookup failed: {e}")
            raise UnexpectedError("Database error occurred") from e

    def _email_taken(self, email: str) -> bool:
        try:
            with self.store.session("users") as db:
                return db.query(User.id).filter(User.email == email).first() is not None
        except StoreQueryError as e:
            logger.error(f"Registration lookup failed: {e}")
            raise UnexpectedError("Database error occurred") from e

    def _create_account(self, email: str, password: str) -> PublicIdentity:
        if self._email_taken(email):
            raise DuplicateAccount()

        hashed = get_password_hash(password, self.rounds)
        now = datetime.now()
        try:
            with self.store.session("users") as db:
                user = User(email=email, hashed_password=hashed, created_at=now, updated_at=now)
                db.add(user)
                db.commit()
                db.refresh(user)
                if user.id is None:
                    raise PersistenceError()
                return PublicIdentity.model_validate(user)
        except StoreQueryError as e:
            # A concurrent registration won the race for this email
            if isinstance(e.original, IntegrityError):
                raise DuplicateAccount() from e
            logger.error(f"Account insert failed: {e}")
            raise PersistenceError() from e
