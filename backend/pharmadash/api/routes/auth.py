"""Auth: register, login, logout, current identity.

Failures come back as an AuthResult body with a matching status code:
401 bad credentials, 409 duplicate email, 500 persistence/unexpected.

SECURITY:
- Each client gets its own signed session token on login, in an httpOnly,
  SameSite=strict cookie and in the response body for API clients
- Logout requires a session and only clears the caller's cookie
"""
from fastapi import APIRouter, Depends, Response, status

from pharmadash.api.deps import get_auth_service, get_current_identity
from pharmadash.core.config import settings
from pharmadash.core.security import create_access_token
from pharmadash.schemas.user import AuthResult, LoginResponse, PublicIdentity, UserCreate, UserLogin
from pharmadash.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=AuthResult)
def register(data: UserCreate, response: Response, auth: AuthService = Depends(get_auth_service)):
    """Create an account. Does not sign the caller in."""
    result = auth.register(data.email, data.password)
    response.status_code = status.HTTP_201_CREATED if result.success else result.status_code
    return result


@router.post("/login", response_model=LoginResponse)
def login(data: UserLogin, response: Response, auth: AuthService = Depends(get_auth_service)):
    result = auth.authenticate(data.email, data.password)
    response.status_code = result.status_code
    if not result.success:
        return LoginResponse(**result.model_dump())

    token = create_access_token(subject=str(result.user.id))
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        secure=settings.SECURE_COOKIES,
        httponly=True,
        samesite=settings.SAME_SITE_COOKIE,
    )
    return LoginResponse(**result.model_dump(), access_token=token)


@router.post("/logout", response_model=AuthResult)
def logout(
    response: Response,
    identity: PublicIdentity = Depends(get_current_identity),
    auth: AuthService = Depends(get_auth_service),
):
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        secure=settings.SECURE_COOKIES,
        httponly=True,
        samesite=settings.SAME_SITE_COOKIE,
    )
    return auth.sign_out(identity)


@router.get("/me", response_model=PublicIdentity)
def me(identity: PublicIdentity = Depends(get_current_identity)):
    return identity
