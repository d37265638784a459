"""
Audit logging for authentication events.

Entries are JSON lines on the "audit" logger so they can be shipped
separately from the application log. Passwords and hashes are never logged.
"""
import logging
import json
from datetime import datetime, timezone
from typing import Optional

audit_logger = logging.getLogger("audit")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class AuditLog:
    """Central audit logging for session events."""

    @staticmethod
    def log_authentication(
        action: str,  # "login", "register", "logout"
        email: str,
        success: bool,
        reason: str = "",
    ):
        """
        Log an authentication attempt.

        Usage:
            AuditLog.log_authentication("login", "user@example.com", True)
            AuditLog.log_authentication("login", "user@example.com", False, reason="InvalidCredentials")
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": f"auth.{action}",
            "email": email,
            "success": success,
        }

        if reason and not success:
            log_entry["reason"] = reason

        if success:
            audit_logger.info(json.dumps(log_entry))
        else:
            audit_logger.warning(json.dumps(log_entry))

    @staticmethod
    def log_session_restored(user_id: int, email: str, source: Optional[str] = None):
        """
        Log a session restored from the local identity cache.

        The cached identity is not re-validated against the store, so these
        entries are the only trace of which identity a process started with.
        """
        log_entry = {
            "timestamp": _now(),
            "event_type": "auth.session_restored",
            "user_id": user_id,
            "email": email,
        }
        if source:
            log_entry["source"] = source

        audit_logger.info(json.dumps(log_entry))
