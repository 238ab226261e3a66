from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models import User
from app.security import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Resolve the authenticated user for a request.

    Reads ``Authorization: Bearer <token>``, validates the token, and loads
    the user named by its ``sub`` claim from the request's session.

    Raises
    ------
    HTTPException(401)
        Token missing, malformed, expired, or naming an unknown user.
    """
    if creds is None or not creds.credentials.strip():
        raise _unauthorized("Not authenticated")

    try:
        payload = decode_access_token(creds.credentials.strip())
    except JWTError as exc:
        raise _unauthorized("Invalid or expired token") from exc

    result = await db.execute(select(User).where(User.username == payload["sub"]))
    user = result.scalar_one_or_none()
    if user is None:
        raise _unauthorized("Unknown user")
    return user
