import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from library_portal.database import get_db
from library_portal.models.profile import Profile
from library_portal.schemas.auth import ProfileCreate, ProfileLogin, ProfileResponse, Token
from library_portal.services.auth import (
    check_password,
    hash_password,
    create_access_token,
    get_current_user
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

def issue_token(profile: Profile) -> Token:
    return Token(
        access_token=create_access_token(profile.profile_id),
        token_type="bearer",
        user=ProfileResponse.model_validate(profile.to_dict())
    )

@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(profile_data: ProfileCreate, db: Session = Depends(get_db)):
    """Register a new profile."""
    existing = db.query(Profile).filter(Profile.email == profile_data.email).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email already exists"
        )

    profile = Profile(
        email=profile_data.email,
        name=profile_data.name,
        password_hash=hash_password(profile_data.password),
        role=profile_data.role or 'student'
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)

    logger.info(f"Registered profile {profile.profile_id} with role {profile.role}")
    return issue_token(profile)

@router.post("/login", response_model=Token)
async def login(credentials: ProfileLogin, db: Session = Depends(get_db)):
    """Login and get access token."""
    profile = db.query(Profile).filter(Profile.email == credentials.email).first()
    if not profile or not check_password(profile, credentials.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )
    return issue_token(profile)

@router.get("/me", response_model=ProfileResponse)
async def get_current_user_info(current_user: Profile = Depends(get_current_user)):
    """Get current authenticated profile."""
    return ProfileResponse.model_validate(current_user.to_dict())
