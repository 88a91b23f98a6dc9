"""
Contact record schemas for CSV import and listing.
"""
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

T = TypeVar("T")


class ImportSummary(BaseModel):
    """Response after a CSV file was imported in full."""
    records_imported: int
    message: str
    upload_id: int


class ContactRecordResponse(BaseModel):
    """A stored contact record."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    correo: str
    nombre: str
    telefono: str
    ciudad: str
    notas: Optional[str] = None
    upload_id: int = Field(validation_alias=AliasChoices("batch_id", "upload_id"))
    created_at: datetime


class Page(BaseModel, Generic[T]):
    """One page of results plus the totals needed to render pagination."""
    data: List[T]
    total: int
    page: int
    limit: int
    total_pages: int


class DeleteResponse(BaseModel):
    deleted: bool = True
    message: str
