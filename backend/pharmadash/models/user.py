from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime
from pharmadash.db.base import Base


class User(Base):
    """Dashboard account. Compared at login only; hashed_password never leaves the auth service."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)
