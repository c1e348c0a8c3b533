import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List
from library_portal.database import get_db
from library_portal.models.profile import Profile
from library_portal.services.auth import require_librarian
from library_portal.schemas.auth import ProfileResponse, ProfileUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profiles", tags=["Profiles"])

@router.get("", response_model=List[ProfileResponse])
async def get_profiles(
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """List every profile, ordered by name."""
    profiles = db.query(Profile).order_by(Profile.name).all()
    return [ProfileResponse.model_validate(p.to_dict()) for p in profiles]

@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: int,
    updates: ProfileUpdate,
    current_user: Profile = Depends(require_librarian),
    db: Session = Depends(get_db)
):
    """Change a profile's role or contact details."""
    profile = db.query(Profile).filter(Profile.profile_id == profile_id).first()
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )

    changes = updates.model_dump(exclude_unset=True)
    if changes.get("name") is None:
        changes.pop("name", None)
    if changes.get("role") is None:
        changes.pop("role", None)

    previous_role = profile.role
    for field, value in changes.items():
        setattr(profile, field, value)

    db.commit()
    db.refresh(profile)

    if profile.role != previous_role:
        logger.info(
            f"Profile {profile_id} role changed {previous_role} -> {profile.role} "
            f"by librarian {current_user.profile_id}"
        )
    return ProfileResponse.model_validate(profile.to_dict())
