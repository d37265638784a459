"""Client-local identity cache: one JSON file, one fixed key, kept until logout."""
import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from pharmadash.core.config import settings
from pharmadash.schemas.user import PublicIdentity

logger = logging.getLogger(__name__)


class IdentityCache:
    def __init__(self, path: str | Path | None = None, key: str | None = None):
        self.path = Path(path or settings.IDENTITY_CACHE_PATH)
        self.key = key or settings.IDENTITY_CACHE_KEY

    def load(self) -> Optional[PublicIdentity]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            cached = data.get(self.key)
            if cached is None:
                return None
            return PublicIdentity.model_validate(cached)
        except (OSError, ValueError, AttributeError, ValidationError) as e:
            # Unreadable cache means "not signed in", never a crash at startup
            logger.warning(f"Ignoring unreadable identity cache {self.path}: {e}")
            return None

    def save(self, identity: PublicIdentity) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {self.key: identity.model_dump(mode="json")}
        self.path.write_text(json.dumps(payload), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
