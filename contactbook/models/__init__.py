"""
SQLAlchemy models for the contact book.
"""
from contactbook.models.user import User
from contactbook.models.upload_batch import UploadBatch
from contactbook.models.contact_record import ContactRecord
from contactbook.models.token_blacklist import TokenBlacklist


__all__ = [
    "User",
    "UploadBatch",
    "ContactRecord",
    "TokenBlacklist",
]
