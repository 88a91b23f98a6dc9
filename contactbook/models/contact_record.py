"""
Contact record model for validated CSV rows.
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship

from contactbook.db.base import Base


class ContactRecord(Base):
    """One contact imported from a CSV row. Records are never updated."""
    __tablename__ = "contact_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    correo = Column(String(255), nullable=False)
    nombre = Column(String(255), nullable=False)
    telefono = Column(String(20), nullable=False)
    ciudad = Column(String(100), nullable=False)
    notas = Column(Text, nullable=True)
    batch_id = Column(
        Integer,
        ForeignKey("upload_batches.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    batch = relationship("UploadBatch", back_populates="records")
