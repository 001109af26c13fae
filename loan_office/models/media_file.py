import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from loan_office.db.base import Base


class MediaFile(Base):
    """Pointer to a document held in external object storage."""

    __tablename__ = "media_files"
    __allow_unmapped__ = True
    __table_args__ = (
        CheckConstraint(
            "file_type IN ('CONTRACT_PDF', 'OTHER_DOCUMENT')",
            name="ck_media_file_type",
        ),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    file_name = Column(String(255), nullable=False)
    file_type = Column(String(30), nullable=False)
    file_url = Column(Text, nullable=False)
    description = Column(String(255), nullable=True)
    client_id = Column(
        UUID(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    loan_record_id = Column(
        UUID(as_uuid=True),
        ForeignKey("loan_records.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    client = relationship("Client", back_populates="media_files")
    loan_record = relationship("LoanRecord", back_populates="media_files")
