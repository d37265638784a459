"""FastAPI dependencies: the injected store, the auth service and the caller's session.

Every HTTP and WebSocket client carries its own signed session token:
1. Authorization: Bearer header (API clients)
2. httpOnly cookie (browser dashboard)
3. `token` query parameter (WebSockets only, where browsers cannot set headers)
"""
from typing import Optional

from fastapi import Depends, Request, WebSocket
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from pharmadash.core.config import settings
from pharmadash.core.exceptions import BusinessError
from pharmadash.core.security import decode_access_token
from pharmadash.db.store import PharmacyStore
from pharmadash.schemas.user import PublicIdentity
from pharmadash.services.auth_service import AuthService, AuthSession

bearer = HTTPBearer(auto_error=False)


def get_store(request: Request) -> PharmacyStore:
    return request.app.state.store


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth


def session_from_token(auth: AuthService, token: Optional[str]) -> AuthSession:
    """Resolve a token to a session; unauthenticated when missing, invalid or expired."""
    if not token:
        return AuthSession()
    sub = decode_access_token(token)
    if not sub:
        return AuthSession()
    try:
        user_id = int(sub)
    except ValueError:
        return AuthSession()
    return AuthSession(identity=auth.identity_for(user_id))


def get_auth_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    auth: AuthService = Depends(get_auth_service),
) -> AuthSession:
    """Header takes precedence over cookie."""
    token = credentials.credentials if credentials else request.cookies.get(settings.SESSION_COOKIE_NAME)
    return session_from_token(auth, token)


def get_current_identity(session: AuthSession = Depends(get_auth_session)) -> PublicIdentity:
    """Signed-in identity, or 401."""
    if not session.is_authenticated:
        raise BusinessError.unauthorized("no valid session token")
    return session.identity


def websocket_session(websocket: WebSocket) -> AuthSession:
    token = None
    scheme, _, credentials = websocket.headers.get("authorization", "").partition(" ")
    if scheme.lower() == "bearer" and credentials:
        token = credentials
    token = token or websocket.cookies.get(settings.SESSION_COOKIE_NAME) or websocket.query_params.get("token")
    return session_from_token(websocket.app.state.auth, token)
