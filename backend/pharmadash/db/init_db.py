"""Create all tables. Run on app startup.

SECURITY: the default admin gets a random password (never hardcoded),
printed once to the log on first start.
"""
import logging
import secrets

from pharmadash.core.config import settings
from pharmadash.core.security import get_password_hash
from pharmadash.db.base import Base
from pharmadash.db.store import PharmacyStore
from pharmadash import models  # noqa: F401 - register models
from pharmadash.models.user import User

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_EMAIL = "admin@citypharmacy.com"


def init_db(store: PharmacyStore, seed_admin: bool | None = None):
    Base.metadata.create_all(bind=store.engine)

    if seed_admin is None:
        seed_admin = settings.SEED_DEFAULT_ADMIN
    if not seed_admin:
        return

    with store.session("users") as db:
        if db.query(User).count() > 0:
            return

        default_password = secrets.token_urlsafe(16)
        db.add(User(email=DEFAULT_ADMIN_EMAIL, hashed_password=get_password_hash(default_password)))
        db.commit()

        logger.warning(
            "Default admin user created: email=%s password=%s "
            "(change this password after first login)",
            DEFAULT_ADMIN_EMAIL,
            default_password,
        )
