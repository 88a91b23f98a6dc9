"""
Contact record service: paginated listing, lookup and admin-only delete.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from contactbook.core.exceptions import ForbiddenError, NotFoundError
from contactbook.models.contact_record import ContactRecord
from contactbook.models.user import User
from contactbook.services.pagination import paginate

logger = logging.getLogger(__name__)


class ContactRecordService:

    def __init__(self, db: Session):
        self.db = db

    def list(
        self,
        page: int,
        limit: int,
        upload_id: Optional[int] = None,
    ) -> Tuple[List[ContactRecord], int]:
        query = self.db.query(ContactRecord)
        if upload_id is not None:
            query = query.filter(ContactRecord.batch_id == upload_id)
        query = query.order_by(ContactRecord.created_at.desc(), ContactRecord.id.desc())
        return paginate(query, page, limit)

    def get(self, record_id: int) -> ContactRecord:
        record = self.db.get(ContactRecord, record_id)
        if record is None:
            raise NotFoundError("Contact record", record_id)
        return record

    def delete(self, record_id: int, user: User) -> None:
        """
        Delete a single record (admins only).

        The owning batch keeps its as-imported total_records.
        """
        record = self.get(record_id)
        if not user.is_admin:
            raise ForbiddenError("Only administrators can delete contact records")

        self.db.delete(record)
        self.db.commit()
        logger.info(f"Deleted contact record {record_id} by user {user.id}")
