import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from loan_office.db.base import Base
from loan_office.schemas.common import LoanStatus

_STATUS_VALUES = ", ".join(f"'{status.value}'" for status in LoanStatus)


class LoanRecord(Base):
    __tablename__ = "loan_records"
    __allow_unmapped__ = True
    __table_args__ = (
        CheckConstraint("loan_amount >= 0", name="ck_loan_record_amount_nonneg"),
        CheckConstraint("interest_rate >= 0", name="ck_loan_record_rate_nonneg"),
        CheckConstraint("registration_fee >= 0", name="ck_loan_record_fee_nonneg"),
        CheckConstraint("loan_duration >= 0", name="ck_loan_record_duration_nonneg"),
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_loan_record_status"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    client_id = Column(
        UUID(as_uuid=True),
        ForeignKey("clients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    loan_amount = Column(Numeric(14, 2), nullable=False)
    interest_rate = Column(Numeric(7, 3), nullable=False)
    registration_fee = Column(Numeric(14, 2), nullable=False, default=0)
    loan_duration = Column(Integer, nullable=False)
    application_date = Column(DateTime(timezone=True), nullable=False, index=True)
    disbursement_date = Column(DateTime(timezone=True), nullable=True)
    first_installment_date = Column(DateTime(timezone=True), nullable=True, index=True)
    last_installment_date = Column(DateTime(timezone=True), nullable=True, index=True)
    daily_payment_check = Column(Boolean, nullable=False, default=False)
    loan_officer = Column(String(150), nullable=False)
    status = Column(String(20), nullable=False, default=LoanStatus.PENDING.value, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    client = relationship("Client", back_populates="loan_records")
    guarantors = relationship("Guarantor", back_populates="loan_record", cascade="all, delete-orphan")
    references = relationship("Reference", back_populates="loan_record", cascade="all, delete-orphan")
    media_files = relationship("MediaFile", back_populates="loan_record", cascade="all, delete-orphan")
