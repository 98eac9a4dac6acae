"""
Result persistence for the Interview Grader platform.

Two stores implement the same small protocol (append, list_all, get_by_id):

- ``JsonFileResultStore`` keeps an aggregate ``interviews.json`` plus one
  ``interview_<id>.json`` file per session in a storage directory.
- ``MongoResultStore`` keeps one document per session in a MongoDB
  collection with a unique index on ``id``.

Re-appending an identical result is a no-op; a different result under an
already stored id is refused. Failures inside a store raise
``PersistenceError``; ``append`` converts them into a ``PersistOutcome`` so
callers can keep the computed result and retry later.
"""
import json
import logging
import os
import tempfile
import threading
from typing import Any, Dict, List, Optional

import pymongo
from pymongo.errors import DuplicateKeyError, PyMongoError
from pymongo.mongo_client import MongoClient

from interview_grader.models.session import SessionResult

logger = logging.getLogger(__name__)

INTERVIEWS_FILE = "interviews.json"


class PersistenceError(RuntimeError):
    """Raised when a result store cannot read or write its backing storage."""


class PersistOutcome:
    """
    Outcome of an append.

    Attributes:
        success: Whether the result is durably stored
        record_id: Id of the record the outcome refers to
        error: Error message when the append failed
    """

    def __init__(self, success: bool, record_id: str, error: Optional[str] = None):
        self.success = success
        self.record_id = record_id
        self.error = error

    def __bool__(self):
        return self.success

    def __repr__(self):
        return f"PersistOutcome(success={self.success}, record_id={self.record_id!r}, error={self.error!r})"


class ResultStore:
    """Base class for session result stores."""

    backend = "base"

    def append(self, result: SessionResult) -> PersistOutcome:
        """
        Store a session result.

        Re-appending an identical result reports success without duplicating
        it. A different result under an already stored id is refused.

        Args:
            result: The assembled session result

        Returns:
            PersistOutcome describing whether the write succeeded
        """
        try:
            self._write(result.to_record())
        except PersistenceError as e:
            logger.error(f"Failed to persist interview {result.id}: {e}")
            return PersistOutcome(False, result.id, str(e))
        return PersistOutcome(True, result.id)

    def list_all(self) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def _write(self, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release backend resources; a no-op for file stores."""


class JsonFileResultStore(ResultStore):
    """File-backed store; safe for concurrent appends within one process."""

    backend = "json"

    def __init__(self, directory: str):
        self.directory = directory
        self.index_path = os.path.join(directory, INTERVIEWS_FILE)
        self._lock = threading.Lock()

        try:
            os.makedirs(directory, exist_ok=True)
            if not os.path.exists(self.index_path):
                self._dump(self.index_path, [])
        except OSError as e:
            raise PersistenceError(f"Cannot initialise storage directory {directory}: {e}") from e

        logger.info(f"JSON result store initialized at {directory}")

    def record_path(self, record_id: str) -> str:
        return os.path.join(self.directory, f"interview_{record_id}.json")

    def _write(self, record: Dict[str, Any]) -> None:
        record_id = record["id"]
        path = self.record_path(record_id)
        with self._lock:
            records = self._load_index()
            existing = next((r for r in records if r.get("id") == record_id), None)
            if existing is not None and existing != record:
                raise PersistenceError(f"Interview id {record_id} already holds a different record")
            try:
                # The index is written last; a record is listed only once its own file exists
                self._dump(path, record)
                if existing is None:
                    records.append(record)
                    try:
                        self._dump(self.index_path, records)
                    except (OSError, TypeError, ValueError):
                        os.remove(path)
                        raise
            except (OSError, TypeError, ValueError) as e:
                raise PersistenceError(f"Cannot write interview {record_id}: {e}") from e

        if existing is not None:
            logger.info(f"Interview {record_id} already stored")
        else:
            logger.info(f"Interview saved: {path}")

    def list_all(self) -> List[Dict[str, Any]]:
        with self._lock:
            return self._load_index()

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        path = self.record_path(record_id)
        if os.path.exists(path):
            try:
                with open(path, "r", encoding="utf-8") as f:
                    return json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"Could not read {path}: {e}; falling back to index")

        for record in self.list_all():
            if record.get("id") == record_id:
                return record
        return None

    def _load_index(self) -> List[Dict[str, Any]]:
        if not os.path.exists(self.index_path):
            return []
        try:
            with open(self.index_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except ValueError as e:
            raise PersistenceError(f"Corrupt interview index {self.index_path}: {e}") from e
        except OSError as e:
            raise PersistenceError(f"Cannot read interview index {self.index_path}: {e}") from e
        return data if isinstance(data, list) else []

    def _dump(self, path: str, data: Any) -> None:
        # Write to a sibling temp file and rename so readers never see a partial file
        fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_path, path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise


class MongoResultStore(ResultStore):
    """MongoDB-backed store, one document per interview."""

    backend = "mongodb"

    def __init__(
        self,
        connection_uri: str = None,
        database_name: str = "interview_grader",
        collection_name: str = "interview_results",
        collection=None,
    ):
        """
        Initialize the store.

        Args:
            connection_uri: MongoDB connection URI
            database_name: Name of the database
            collection_name: Name of the results collection
            collection: Ready collection object; skips creating a client when given
        """
        self.connection_uri = connection_uri
        self.database_name = database_name
        self.collection_name = collection_name

        self.client = None
        if collection is None:
            self.client = MongoClient(connection_uri)
            self.db = self.client[database_name]
            collection = self.db[collection_name]
        self.collection = collection

        try:
            self.collection.create_index([("id", pymongo.ASCENDING)], unique=True)
            self.collection.create_index([("timestamp", pymongo.DESCENDING)])
        except PyMongoError as e:
            raise PersistenceError(f"Cannot prepare collection {collection_name}: {e}") from e

        logger.info(f"MongoDB result store initialized ({database_name}.{collection_name})")

    def _write(self, record: Dict[str, Any]) -> None:
        record_id = record["id"]
        try:
            try:
                # insert_one adds _id to the document it is given
                self.collection.insert_one(dict(record))
            except DuplicateKeyError:
                existing = self.collection.find_one({"id": record_id}, {"_id": 0})
            else:
                logger.info(f"Interview {record_id} saved to MongoDB")
                return
        except PyMongoError as e:
            raise PersistenceError(f"Cannot write interview {record_id}: {e}") from e

        if existing != record:
            raise PersistenceError(f"Interview id {record_id} already holds a different record")
        logger.info(f"Interview {record_id} already stored")

    def list_all(self) -> List[Dict[str, Any]]:
        try:
            cursor = self.collection.find({}, {"_id": 0}, sort=[("timestamp", pymongo.ASCENDING)])
            return list(cursor)
        except PyMongoError as e:
            raise PersistenceError(f"Cannot list interviews: {e}") from e

    def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            return self.collection.find_one({"id": record_id}, {"_id": 0})
        except PyMongoError as e:
            raise PersistenceError(f"Cannot load interview {record_id}: {e}") from e

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("MongoDB result store connection closed")


def create_store(storage_config: Dict[str, Any]) -> ResultStore:
    """
    Build the result store named by the storage configuration.

    Args:
        storage_config: The ``storage`` section of the configuration

    Returns:
        A JsonFileResultStore or MongoResultStore
    """
    backend = str(storage_config.get("backend", "json")).lower()
    if backend in ("mongodb", "mongo"):
        return MongoResultStore(
            connection_uri=storage_config.get("mongodb_uri"),
            database_name=storage_config.get("mongodb_database", "interview_grader"),
            collection_name=storage_config.get("results_collection", "interview_results"),
        )
    if backend != "json":
        raise ValueError(f"Unknown storage backend: {backend}")
    return JsonFileResultStore(storage_config.get("directory", "./interview_data"))
