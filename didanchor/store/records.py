import json
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from didanchor.exceptions import PersistenceError
from didanchor.logging import get_logger
from didanchor.models import AnchoredCredential, CredentialSchemaRecord
from didanchor.store import crud

logger = get_logger(__name__)

T = TypeVar("T")


class RecordStore(ABC):
    """Persistence of identities (keyed by DID), schemas and credentials (keyed by ledger id)."""

    @abstractmethod
    def create_identity(
        self,
        did: str,
        document: Dict[str, Any],
        private_key_ref: Optional[str] = None,
        blockchain_status: Optional[str] = None,
    ) -> None: ...

    @abstractmethod
    def get_identity_document(self, did: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    def create_schema(self, record: CredentialSchemaRecord) -> None: ...

    @abstractmethod
    def get_schema(self, schema_id: str) -> Optional[CredentialSchemaRecord]: ...

    @abstractmethod
    def create_credential(self, record: AnchoredCredential) -> None: ...

    @abstractmethod
    def get_credential(self, credential_id: str) -> Optional[AnchoredCredential]: ...


class SqlRecordStore(RecordStore):
    """RecordStore backed by SQLAlchemy; one session per operation."""

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def _run(self, action: str, fn: Callable[[Session], T]) -> T:
        db = self.session_factory()
        try:
            return fn(db)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Database error while trying to {action}: {type(e).__name__} - {e}")
            raise PersistenceError(f"Failed to {action}")
        finally:
            db.close()

    def create_identity(self, did, document, private_key_ref=None, blockchain_status=None):
        self._run(
            f"store identity {did}",
            lambda db: crud.create_identity(db, did, document, private_key_ref, blockchain_status),
        )

    def get_identity_document(self, did):
        def fetch(db):
            db_identity = crud.get_identity(db, did)
            return json.loads(db_identity.did_doc_json) if db_identity else None
        return self._run(f"load identity {did}", fetch)

    def create_schema(self, record):
        self._run(f"store schema {record.id}", lambda db: crud.create_schema(db, record))

    def get_schema(self, schema_id):
        def fetch(db):
            db_schema = crud.get_schema(db, schema_id)
            return crud.schema_to_record(db_schema) if db_schema else None
        return self._run(f"load schema {schema_id}", fetch)

    def create_credential(self, record):
        self._run(f"store credential {record.id}", lambda db: crud.create_credential(db, record))

    def get_credential(self, credential_id):
        def fetch(db):
            db_credential = crud.get_credential(db, credential_id)
            return crud.credential_to_record(db_credential) if db_credential else None
        return self._run(f"load credential {credential_id}", fetch)
