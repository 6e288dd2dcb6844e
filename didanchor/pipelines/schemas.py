from typing import Any, Dict
from uuid import uuid4

from didanchor.anchors.factory import AnchorBackendFactory
from didanchor.config import Settings
from didanchor.exceptions import NotFoundError
from didanchor.logging import get_logger
from didanchor.models import BlockchainStatus, CreateSchemaRequest, CredentialSchemaRecord
from didanchor.store.records import RecordStore

logger = get_logger(__name__)


class SchemaAnchorPipeline:
    """Creates credential schemas, anchoring them when a ledger method is configured.

    Without a ledger the schema is stored PENDING under a locally generated id.
    """

    def __init__(self, settings: Settings, anchor_factory: AnchorBackendFactory, store: RecordStore):
        self.settings = settings
        self.anchor_factory = anchor_factory
        self.store = store

    def create_schema(self, request: CreateSchemaRequest) -> Dict[str, Any]:
        schema = dict(request.schema_)
        backend = self.anchor_factory.get_backend(self.settings.anchor_method)

        if backend is not None:
            anchored = backend.anchor_schema(request.schema_)
            schema["id"] = anchored.schemaId
            blockchain_status = BlockchainStatus.ANCHORED
        else:
            schema["id"] = f"did:schema:{uuid4()}"
            blockchain_status = BlockchainStatus.PENDING

        record = CredentialSchemaRecord(
            id=schema["id"],
            schema=schema,
            tags=request.tags,
            status=request.status,
            blockchainStatus=blockchain_status,
        )
        self.store.create_schema(record)
        logger.info(f"Created schema {record.id} ({blockchain_status.value})")
        return record.to_dict()

    def get_schema(self, schema_id: str) -> Dict[str, Any]:
        record = self.store.get_schema(schema_id)
        if record is None:
            raise NotFoundError(f"Schema with id {schema_id} not found")
        return record.to_dict()
