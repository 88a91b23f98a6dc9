"""
Token blacklist model for handling token revocation.

When refresh tokens are used, the old token is blacklisted to prevent reuse.
"""
from sqlalchemy import Column, String, DateTime, Index
from sqlalchemy.sql import func

from contactbook.db.base import Base


class TokenBlacklist(Base):
    """Store revoked JWT tokens by hash."""
    __tablename__ = "token_blacklist"

    token_hash = Column(String(64), primary_key=True)
    blacklisted_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    # kept for cleanup of expired entries
    expires_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('idx_token_blacklist_expires', 'expires_at'),
    )
