"""Company profile routes."""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import require_admin, require_employee
from app.database import get_db
from app.models.company_profile import PROFILE_ID, CompanyProfile
from app.models.user import User
from app.schemas.company_profile import CompanyProfileResponse, CompanyProfileUpdate

router = APIRouter(prefix="/company-profile", tags=["Company Profile"])

DEFAULT_PROFILE = {
    "name": "Your Company Name",
    "address_line1": "123 Your Street, Your City",
    "address_line2": "Your Province, Postal Code",
    "phone": "Your Phone Number",
    "tax_id": "Your Tax ID",
}


def _get_or_create_profile(db: Session) -> CompanyProfile:
    profile = db.get(CompanyProfile, PROFILE_ID)
    if profile is None:
        profile = CompanyProfile(id=PROFILE_ID, **DEFAULT_PROFILE)
        db.add(profile)
        db.commit()
        db.refresh(profile)
    return profile


@router.get("/", response_model=CompanyProfileResponse)
async def get_company_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    """The seller details, created with placeholders on first read."""
    return _get_or_create_profile(db)


@router.put("/", response_model=CompanyProfileResponse)
async def update_company_profile(
    profile_update: CompanyProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    profile = _get_or_create_profile(db)
    for field, value in profile_update.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile
