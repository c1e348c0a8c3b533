from sqlalchemy import Column, String, DateTime, Integer, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from library_portal.database import Base

ROLES = ("student", "librarian")

class Profile(Base):
    __tablename__ = "profiles"

    profile_id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    role = Column(String(50), default='student', nullable=False)
    password_hash = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    address = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    transactions = relationship("Transaction", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("role IN ('student', 'librarian')", name="chk_profile_role"),
    )

    @property
    def is_librarian(self) -> bool:
        return self.role == 'librarian'

    def to_dict(self):
        return {
            "id": str(self.profile_id),
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "phone": self.phone,
            "address": self.address,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
