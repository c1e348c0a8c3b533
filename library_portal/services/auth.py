import logging
from datetime import timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from library_portal.config import settings
from library_portal.models.profile import Profile
from library_portal.database import get_db
from library_portal.utils.timezone import now_local

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is answered by unauthorized() below
bearer_scheme = HTTPBearer(auto_error=False)

password_hasher = CryptContext(schemes=["bcrypt"], deprecated="auto")

def hash_password(password: str) -> str:
    return password_hasher.hash(password)

def check_password(profile: Profile, password: str) -> bool:
    """True when the password matches the profile's stored bcrypt hash."""
    try:
        return password_hasher.verify(password, profile.password_hash)
    except ValueError:
        logger.error(f"Profile {profile.profile_id} has an unreadable password hash")
        return False

def create_access_token(profile_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a bearer token whose subject is the profile id."""
    lifetime = expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes)
    claims = {"sub": str(profile_id), "exp": now_local() + lifetime}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)

def unauthorized(reason: str) -> HTTPException:
    logger.warning(f"Rejected credentials: {reason}")
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials. Please provide a valid Authorization header with Bearer token.",
        headers={"WWW-Authenticate": "Bearer"},
    )

def profile_id_from_token(token: str) -> int:
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise unauthorized(f"invalid token ({e})")

    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise unauthorized("token subject is not a profile id")

def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> Profile:
    """Resolve the bearer token to the signed-in profile."""
    if credentials is None or not credentials.credentials:
        raise unauthorized("missing or malformed Authorization header")

    profile_id = profile_id_from_token(credentials.credentials)
    profile = db.query(Profile).filter(Profile.profile_id == profile_id).first()
    if profile is None:
        raise unauthorized(f"profile {profile_id} no longer exists")
    return profile

def require_librarian(current_user: Profile = Depends(get_current_user)) -> Profile:
    """Allow the request through only for librarians."""
    if not current_user.is_librarian:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only librarians can perform this action"
        )
    return current_user
