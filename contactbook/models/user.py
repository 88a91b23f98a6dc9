from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from contactbook.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user", server_default="user")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    uploads = relationship("UploadBatch", back_populates="uploaded_by")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
