"""
Upload batch router: list, inspect, download and delete accepted uploads.
"""
from pathlib import Path

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from contactbook.core.deps import (
    PageParams,
    get_current_user,
    get_file_store,
    get_page_params,
    require_admin,
)
from contactbook.db.session import get_db
from contactbook.models.user import User
from contactbook.schemas.documents import DeleteResponse, Page
from contactbook.schemas.uploads import UploadBatchDetail, UploadBatchResponse
from contactbook.services.file_store import LocalFileStore
from contactbook.services.pagination import total_pages
from contactbook.services.uploads import UploadBatchService

router = APIRouter(prefix="/uploads", tags=["uploads"])


def _page(batches, total: int, paging: PageParams) -> Page[UploadBatchResponse]:
    return Page[UploadBatchResponse](
        data=[UploadBatchResponse.model_validate(batch) for batch in batches],
        total=total,
        page=paging.page,
        limit=paging.limit,
        total_pages=total_pages(total, paging.limit),
    )


@router.get("", response_model=Page[UploadBatchResponse])
def list_my_uploads(
    paging: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    file_store: LocalFileStore = Depends(get_file_store),
):
    """List the current user's uploads, newest first."""
    batches, total = UploadBatchService(db, file_store).list_for_user(
        current_user.id, paging.page, paging.limit
    )
    return _page(batches, total, paging)


@router.get("/all", response_model=Page[UploadBatchResponse])
def list_all_uploads(
    paging: PageParams = Depends(get_page_params),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
    file_store: LocalFileStore = Depends(get_file_store),
):
    """List every upload (admins only)."""
    batches, total = UploadBatchService(db, file_store).list_all(paging.page, paging.limit)
    return _page(batches, total, paging)


@router.get("/{upload_id}", response_model=UploadBatchDetail)
def get_upload(
    upload_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    file_store: LocalFileStore = Depends(get_file_store),
):
    """Get one upload with its as-imported and current record counts."""
    service = UploadBatchService(db, file_store)
    batch = service.get_for_user(upload_id, current_user)
    summary = UploadBatchResponse.model_validate(batch)
    return UploadBatchDetail(
        **summary.model_dump(),
        current_records=service.count_records(batch.id),
    )


@router.get("/{upload_id}/download")
def download_upload(
    upload_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    file_store: LocalFileStore = Depends(get_file_store),
):
    """Download the original CSV of an upload."""
    service = UploadBatchService(db, file_store)
    file_path = service.get_file_path(upload_id, current_user)
    batch = service.get(upload_id)
    return FileResponse(
        file_path,
        media_type="text/csv",
        filename=batch.original_file_name or Path(file_path).name,
    )


@router.delete("/{upload_id}", response_model=DeleteResponse)
def delete_upload(
    upload_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    file_store: LocalFileStore = Depends(get_file_store),
):
    """Delete an upload and all of its contact records."""
    UploadBatchService(db, file_store).delete(upload_id, current_user)
    return DeleteResponse(message="Upload deleted")
