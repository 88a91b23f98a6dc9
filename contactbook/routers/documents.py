"""
Contact documents router: CSV upload and contact record listing.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from contactbook.core.config import get_settings
from contactbook.core.deps import PageParams, get_current_user, get_file_store, get_page_params
from contactbook.core.exceptions import FileNotProvidedError, InvalidFileTypeError
from contactbook.db.session import get_db
from contactbook.models.user import User
from contactbook.schemas.documents import (
    ContactRecordResponse,
    DeleteResponse,
    ImportSummary,
    Page,
)
from contactbook.services.documents import ContactRecordService
from contactbook.services.file_store import LocalFileStore
from contactbook.services.ingestion import ContactIngestionService
from contactbook.services.pagination import total_pages

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/upload", response_model=ImportSummary)
def upload_csv(
    file: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    file_store: LocalFileStore = Depends(get_file_store),
):
    """
    Upload a CSV file of contacts.

    Required columns: correo, nombre, telefono, ciudad. Optional: notas.

    The file is imported only if every row is valid. Otherwise nothing is
    stored and the response lists every row error.
    """
    if file is None:
        raise FileNotProvidedError()

    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise InvalidFileTypeError()

    service = ContactIngestionService(db, file_store)
    return service.ingest_upload(
        file.file,
        original_file_name=file.filename,
        uploaded_by_id=current_user.id,
        max_bytes=get_settings().MAX_UPLOAD_SIZE_BYTES,
    )


@router.get("", response_model=Page[ContactRecordResponse])
def list_documents(
    upload_id: Optional[int] = Query(None, description="Only records from this upload"),
    paging: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List contact records, newest first."""
    records, total = ContactRecordService(db).list(paging.page, paging.limit, upload_id=upload_id)
    return Page[ContactRecordResponse](
        data=[ContactRecordResponse.model_validate(record) for record in records],
        total=total,
        page=paging.page,
        limit=paging.limit,
        total_pages=total_pages(total, paging.limit),
    )


@router.get("/{record_id}", response_model=ContactRecordResponse)
def get_document(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Get one contact record."""
    return ContactRecordResponse.model_validate(ContactRecordService(db).get(record_id))


@router.delete("/{record_id}", response_model=DeleteResponse)
def delete_document(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete one contact record (admins only)."""
    ContactRecordService(db).delete(record_id, current_user)
    return DeleteResponse(message="Contact record deleted")
