"""
Upload batch model: one accepted CSV file and the contacts imported from it.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func, Index
from sqlalchemy.orm import relationship

from contactbook.db.base import Base


class UploadBatch(Base):
    """
    A CSV file that passed validation in full.

    total_records is the count at import time. Deleting single records later
    does not change it; use the live relationship count for the current size.
    """
    __tablename__ = "upload_batches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    original_file_name = Column(String(255), nullable=False)
    stored_file_path = Column(String(1024), nullable=False)
    total_records = Column(Integer, nullable=False)
    uploaded_by_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    uploaded_by = relationship("User", back_populates="uploads")
    records = relationship(
        "ContactRecord",
        back_populates="batch",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index('idx_upload_batches_uploader', 'uploaded_by_id', 'uploaded_at'),
    )
