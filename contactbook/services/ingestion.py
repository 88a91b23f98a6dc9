"""
Contact ingestion service: validates an uploaded CSV and imports it atomically.
"""
import itertools
import logging
from enum import Enum
from pathlib import Path
from typing import BinaryIO

from sqlalchemy import insert
from sqlalchemy.orm import Session

from contactbook.core.exceptions import ContactsError, CSVValidationError, EmptyFileError
from contactbook.models.contact_record import ContactRecord
from contactbook.models.upload_batch import UploadBatch
from contactbook.schemas.documents import ImportSummary
from contactbook.services.csv_parser import CSVReader, check_headers
from contactbook.services.file_store import LocalFileStore
from contactbook.services.validation import ParseOutcome, validate_rows

logger = logging.getLogger(__name__)


class IngestionState(str, Enum):
    """Stages of one ingestion run. Any stage may end in rejection."""
    PARSING = "parsing"
    HEADER_CHECKING = "header_checking"
    ROW_VALIDATING = "row_validating"
    PERSISTING = "persisting"
    DONE = "done"
    REJECTED = "rejected"


class ContactIngestionService:
    """
    Service for importing contact CSV files.

    Features:
    - Streaming parse with encoding detection
    - Header check before any row work
    - Validation of every row, reporting all errors at once
    - All-or-nothing import: the batch and its records share one transaction
    - Temporary file always cleaned up (promoted on success, deleted otherwise)
    """

    def __init__(self, db: Session, file_store: LocalFileStore):
        """
        Initialize ingestion service.

        Args:
            db: SQLAlchemy database session
            file_store: Store holding the temporary upload
        """
        self.db = db
        self.file_store = file_store
        self.state = IngestionState.PARSING

    def _enter(self, state: IngestionState, upload_name: str) -> None:
        self.state = state
        logger.info(f"Ingestion of '{upload_name}': {state.value}")

    def validate_file(self, path: str | Path, original_file_name: str) -> ParseOutcome:
        """
        Parse and validate a stored CSV without touching the database.

        Raises:
            EmptyFileError: no data rows
            MissingHeadersError: required columns absent
            MalformedInputError: the file cannot be read or decoded
        """
        self._enter(IngestionState.PARSING, original_file_name)
        with self.file_store.open(path) as stream:
            reader = CSVReader(stream)
            rows = iter(reader)
            first = next(rows, None)
            if first is None:
                raise EmptyFileError()

            self._enter(IngestionState.HEADER_CHECKING, original_file_name)
            check_headers(reader.headers)

            self._enter(IngestionState.ROW_VALIDATING, original_file_name)
            return validate_rows(itertools.chain([first], rows))

    def ingest_upload(
        self,
        source: BinaryIO,
        original_file_name: str,
        uploaded_by_id: int,
        max_bytes: int | None = None,
    ) -> ImportSummary:
        """Save an incoming stream to the temporary area, then ingest it."""
        temp_path = self.file_store.save_temp(source, original_file_name, max_bytes=max_bytes)
        return self.ingest_file(temp_path, original_file_name, uploaded_by_id)

    def ingest_file(
        self,
        temp_path: str | Path,
        original_file_name: str,
        uploaded_by_id: int,
    ) -> ImportSummary:
        """
        Validate a temporary upload and, if every row is valid, import it.

        Args:
            temp_path: Path of the upload in the store's temporary area
            original_file_name: Client-supplied file name
            uploaded_by_id: Id of the authenticated uploader

        Returns:
            ImportSummary with the imported count and the new batch id

        Raises:
            ContactsError: any rejection; nothing is persisted
        """
        try:
            outcome = self.validate_file(temp_path, original_file_name)
            if not outcome.is_valid:
                raise CSVValidationError(outcome.errors)

            self._enter(IngestionState.PERSISTING, original_file_name)
            batch = self._persist(temp_path, original_file_name, uploaded_by_id, outcome)
        except ContactsError as e:
            self.state = IngestionState.REJECTED
            logger.warning(f"Rejected upload '{original_file_name}': {e.kind.value} - {e.message}")
            raise
        finally:
            self.file_store.delete(temp_path)

        self._enter(IngestionState.DONE, original_file_name)
        count = batch.total_records
        return ImportSummary(
            records_imported=count,
            message=f"{count} record(s) imported successfully",
            upload_id=batch.id,
        )

    def _persist(
        self,
        temp_path: str | Path,
        original_file_name: str,
        uploaded_by_id: int,
        outcome: ParseOutcome,
    ) -> UploadBatch:
        """Create the batch and bulk-insert its records in one transaction."""
        stored_path = self.file_store.promote(temp_path)
        try:
            batch = UploadBatch(
                original_file_name=original_file_name,
                stored_file_path=str(stored_path),
                total_records=len(outcome.records),
                uploaded_by_id=uploaded_by_id,
            )
            self.db.add(batch)
            self.db.flush()  # Get batch ID

            self.db.execute(
                insert(ContactRecord),
                [
                    {**record.model_dump(), "batch_id": batch.id}
                    for record in outcome.records
                ],
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            self.file_store.delete(stored_path)
            self.state = IngestionState.REJECTED
            logger.error(f"Failed to persist upload '{original_file_name}'", exc_info=True)
            raise

        self.db.refresh(batch)
        return batch
