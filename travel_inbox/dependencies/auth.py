from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from travel_inbox.models.user.user import User
from travel_inbox.core.database import get_db
from travel_inbox.core.security import decode_access_token

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


async def _user_from_token(token: str, db: AsyncSession) -> Optional[User]:
    try:
        payload = decode_access_token(token)
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        return None

    return await db.scalar(select(User).filter(User.id == user_id))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> User:
    user = await _user_from_token(credentials.credentials, db)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Viewer identity for endpoints that also serve anonymous callers."""
    if credentials is None:
        return None
    return await _user_from_token(credentials.credentials, db)
