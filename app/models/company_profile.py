"""Company profile model - the seller details printed on receipts."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func

from app.database import Base

PROFILE_ID = 1


class CompanyProfile(Base):
    """Single-row table; the profile always lives at ``PROFILE_ID``."""
    __tablename__ = "company_profile"

    id = Column(Integer, primary_key=True, default=PROFILE_ID)
    name = Column(String(255), nullable=False)
    address_line1 = Column(String(255), nullable=True)
    address_line2 = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    tax_id = Column(String(50), nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
