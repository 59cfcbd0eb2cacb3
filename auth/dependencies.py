# Authentication Dependencies for the OmaHub Studio
# Resolves the calling admin's Profile from the auth provider's JWT

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from jose import jwt, JWTError
from typing import Optional
from pydantic import BaseModel

from config.app_config import JWT_SECRET, JWT_ALGORITHM
from database.config import get_db
from database.models import Profile


security = HTTPBearer()


class TokenData(BaseModel):
    user_id: Optional[str] = None
    email: Optional[str] = None


def decode_access_token(token: str) -> Optional[TokenData]:
    """Decode and validate JWT token."""
    try:
        # Provider tokens carry aud="authenticated"; audience is not checked here
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError:
        return None

    user_id = payload.get("sub")
    email = payload.get("email")
    if user_id is None and email is None:
        return None
    return TokenData(user_id=user_id, email=email)


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> Profile:
    """
    Validate JWT token and return the caller's profile.
    This is the core authentication dependency.
    """
    token_data = decode_access_token(credentials.credentials)

    if token_data is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    profile = None
    if token_data.user_id:
        profile = db.query(Profile).filter(Profile.id == token_data.user_id).first()
    if profile is None and token_data.email:
        profile = db.query(Profile).filter(Profile.email == token_data.email).first()

    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User profile not found"
        )

    return profile
