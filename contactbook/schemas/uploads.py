"""
Upload batch schemas.
"""
from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UploaderSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class UploadBatchResponse(BaseModel):
    """An accepted upload as listed to its owner or an admin."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    original_file_name: str
    total_records: int
    uploaded_by_id: int
    uploaded_at: datetime
    uploaded_by: UploaderSummary | None = None


class UploadBatchDetail(UploadBatchResponse):
    """
    A single upload with its live record count.

    total_records is the count at import time; current_records drops when
    single records are deleted afterwards.
    """
    current_records: int
