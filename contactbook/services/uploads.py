"""
Upload batch service: listing, lookup, download and cascading delete.
"""
import logging
from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from contactbook.core.exceptions import ForbiddenError, NotFoundError
from contactbook.models.contact_record import ContactRecord
from contactbook.models.upload_batch import UploadBatch
from contactbook.models.user import User
from contactbook.services.file_store import LocalFileStore
from contactbook.services.pagination import paginate

logger = logging.getLogger(__name__)


class UploadBatchService:
    """Read and delete accepted uploads. Only the uploader or an admin may act on a batch."""

    def __init__(self, db: Session, file_store: LocalFileStore):
        self.db = db
        self.file_store = file_store

    def _base_query(self):
        return (
            self.db.query(UploadBatch)
            .options(joinedload(UploadBatch.uploaded_by))
            .order_by(UploadBatch.uploaded_at.desc(), UploadBatch.id.desc())
        )

    def list_for_user(self, user_id: int, page: int, limit: int) -> Tuple[List[UploadBatch], int]:
        query = self._base_query().filter(UploadBatch.uploaded_by_id == user_id)
        return paginate(query, page, limit)

    def list_all(self, page: int, limit: int) -> Tuple[List[UploadBatch], int]:
        return paginate(self._base_query(), page, limit)

    def get(self, batch_id: int) -> UploadBatch:
        batch = self.db.get(UploadBatch, batch_id)
        if batch is None:
            raise NotFoundError("Upload", batch_id)
        return batch

    def get_for_user(self, batch_id: int, user: User) -> UploadBatch:
        """Fetch a batch the user may access. NotFound is checked before permissions."""
        batch = self.get(batch_id)
        if not user.is_admin and batch.uploaded_by_id != user.id:
            raise ForbiddenError("You can only access your own uploads")
        return batch

    def count_records(self, batch_id: int) -> int:
        """Live number of records still owned by the batch."""
        stmt = select(func.count(ContactRecord.id)).where(ContactRecord.batch_id == batch_id)
        return self.db.execute(stmt).scalar_one()

    def get_file_path(self, batch_id: int, user: User) -> str:
        batch = self.get_for_user(batch_id, user)
        if not self.file_store.exists(batch.stored_file_path):
            raise NotFoundError("Stored file for upload", batch_id)
        return batch.stored_file_path

    def delete(self, batch_id: int, user: User) -> None:
        """
        Delete a batch, its stored file and (by cascade) all of its records.
        """
        batch = self.get(batch_id)
        if not user.is_admin and batch.uploaded_by_id != user.id:
            raise ForbiddenError("You can only delete your own uploads")

        stored_file_path = batch.stored_file_path
        self.db.delete(batch)
        self.db.commit()

        self.file_store.delete(stored_file_path)
        logger.info(f"Deleted upload {batch_id} by user {user.id}")
