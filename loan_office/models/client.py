import uuid

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from loan_office.db.base import Base


class Client(Base):
    __tablename__ = "clients"
    __allow_unmapped__ = True

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False, index=True)
    id_number = Column(String(50), nullable=False, unique=True, index=True)
    phone_number_1 = Column(String(50), nullable=False)
    phone_number_2 = Column(String(50), nullable=True)
    business_location = Column(String(255), nullable=False)
    permit_number = Column(String(100), nullable=True)
    home_address = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    loan_records = relationship(
        "LoanRecord",
        back_populates="client",
        cascade="all, delete-orphan",
        order_by="LoanRecord.created_at.desc()",
    )
    guarantors = relationship("Guarantor", back_populates="client", cascade="all, delete-orphan")
    references = relationship("Reference", back_populates="client", cascade="all, delete-orphan")
    media_files = relationship("MediaFile", back_populates="client", cascade="all, delete-orphan")
