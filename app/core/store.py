"""
Record store abstraction supporting both a SQL table and an in-memory map.

The tracker treats persistence as a keyed document collection: get/find/put/
patch/delete by id and by field-equality filter, with no multi-document
transactions. Lifecycle rules are written against this interface only, so the
concrete backend can be swapped without touching them.
"""

import copy
import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from app.core.errors import NotFoundError, StoreError, VersionConflictError
from app.models.record import StoredRecord

logger = logging.getLogger(__name__)

# Collection names
APPLICATIONS = "applications"
JOBS = "jobs"
APPLICATION_HISTORY = "application_history"
USERS = "users"
MESSAGES = "messages"


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string (the stored timestamp format)."""
    return datetime.now(timezone.utc).isoformat()


def remove_empty_fields(record: Dict[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is None; the store never persists empty fields."""
    return {key: value for key, value in record.items() if value is not None}


def _matches(record: Dict[str, Any], filters: Dict[str, Any]) -> bool:
    return all(record.get(field) == value for field, value in filters.items())


class RecordStore:
    """Abstract base class for record store backends"""

    def new_id(self) -> str:
        """Generate a fresh record id"""
        return uuid.uuid4().hex

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        """Return the record or None if absent"""
        raise NotImplementedError

    def find(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return every record whose fields equal all of the given filter values"""
        raise NotImplementedError

    def put(self, collection: str, record_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """Full upsert; returns the stored record including its version"""
        raise NotImplementedError

    def patch(
        self,
        collection: str,
        record_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Merge fields into an existing record.

        When expected_version is given the write is conditional and raises
        VersionConflictError if the stored version differs.
        """
        raise NotImplementedError

    def delete(self, collection: str, record_id: str) -> bool:
        """Delete a record; returns False if it did not exist"""
        raise NotImplementedError


class InMemoryRecordStore(RecordStore):
    """Process-local store backed by dictionaries (tests and local development)"""

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, collection: str) -> Dict[str, Dict[str, Any]]:
        return self._collections.setdefault(collection, {})

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        record = self._collection(collection).get(record_id)
        return copy.deepcopy(record) if record is not None else None

    def find(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        filters = filters or {}
        return [
            copy.deepcopy(record)
            for record in self._collection(collection).values()
            if _matches(record, filters)
        ]

    def put(self, collection: str, record_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
        records = self._collection(collection)
        existing = records.get(record_id)

        data = remove_empty_fields(record)
        data["id"] = record_id
        data["version"] = existing["version"] + 1 if existing else 1

        records[record_id] = copy.deepcopy(data)
        return data

    def patch(
        self,
        collection: str,
        record_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        records = self._collection(collection)
        current = records.get(record_id)
        if current is None:
            raise NotFoundError(f"{collection} record {record_id} not found")

        if expected_version is not None and current["version"] != expected_version:
            raise VersionConflictError(
                f"{collection} record {record_id} changed since it was read "
                f"(expected version {expected_version}, found {current['version']})"
            )

        merged = {**current, **remove_empty_fields(fields)}
        merged["id"] = record_id
        merged["version"] = current["version"] + 1

        records[record_id] = copy.deepcopy(merged)
        return merged

    def delete(self, collection: str, record_id: str) -> bool:
        return self._collection(collection).pop(record_id, None) is not None


class SqlRecordStore(RecordStore):
    """SQLAlchemy backend storing documents as JSON rows in the records table"""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _translate_errors(self, action: str):
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Record store {action} failed: {e}")
            raise StoreError(f"Record store {action} failed", original_error=e) from e

    @staticmethod
    def _to_record(row: StoredRecord) -> Dict[str, Any]:
        record = copy.deepcopy(row.data or {})
        record["id"] = row.id
        record["version"] = row.version
        return record

    def _get_row(self, collection: str, record_id: str) -> Optional[StoredRecord]:
        return self.db.query(StoredRecord).filter(
            StoredRecord.collection == collection,
            StoredRecord.id == record_id
        ).first()

    def get(self, collection: str, record_id: str) -> Optional[Dict[str, Any]]:
        with self._translate_errors("get"):
            row = self._get_row(collection, record_id)
            return self._to_record(row) if row else None

    def find(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        filters = filters or {}
        with self._translate_errors("find"):
            rows = self.db.query(StoredRecord).filter(StoredRecord.collection == collection).all()

        # JSON path predicates differ per dialect; equality filters are applied here
        records = (self._to_record(row) for row in rows)
        return [record for record in records if _matches(record, filters)]

    def put(self, collection: str, record_id: str, record: Dict[str, Any]) -> Dict[str, Any]:
        data = remove_empty_fields(record)
        data.pop("id", None)
        data.pop("version", None)

        with self._translate_errors("put"):
            row = self._get_row(collection, record_id)
            if row:
                row.data = data
                row.version = row.version + 1
            else:
                row = StoredRecord(collection=collection, id=record_id, version=1, data=data)
                self.db.add(row)

            self.db.commit()
            self.db.refresh(row)
            return self._to_record(row)

    def patch(
        self,
        collection: str,
        record_id: str,
        fields: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> Dict[str, Any]:
        with self._translate_errors("patch"):
            row = self._get_row(collection, record_id)
            if row is None:
                raise NotFoundError(f"{collection} record {record_id} not found")

            read_version = row.version
            if expected_version is not None and read_version != expected_version:
                raise VersionConflictError(
                    f"{collection} record {record_id} changed since it was read "
                    f"(expected version {expected_version}, found {read_version})"
                )

            merged = {**(row.data or {}), **remove_empty_fields(fields)}
            merged.pop("id", None)
            merged.pop("version", None)

            # Conditional update closes the gap between the read above and this write
            updated = self.db.query(StoredRecord).filter(
                StoredRecord.collection == collection,
                StoredRecord.id == record_id,
                StoredRecord.version == read_version
            ).update(
                {StoredRecord.data: merged, StoredRecord.version: read_version + 1},
                synchronize_session=False
            )
            self.db.commit()

            if updated == 0:
                raise VersionConflictError(
                    f"{collection} record {record_id} was modified concurrently"
                )

            self.db.expire(row)
            return self._to_record(row)

    def delete(self, collection: str, record_id: str) -> bool:
        with self._translate_errors("delete"):
            row = self._get_row(collection, record_id)
            if row is None:
                return False

            self.db.delete(row)
            self.db.commit()
            return True
