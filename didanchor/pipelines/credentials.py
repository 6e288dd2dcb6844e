from typing import Any, Dict

from didanchor.anchors.base import AnchorBackend
from didanchor.anchors.factory import AnchorBackendFactory
from didanchor.config import Settings
from didanchor.exceptions import ConfigurationError, NotFoundError, ValidationError
from didanchor.logging import get_logger
from didanchor.models import AnchoredCredential, BlockchainStatus, IssueCredentialRequest
from didanchor.store.records import RecordStore

logger = get_logger(__name__)


class CredentialAnchorPipeline:
    """Issues credentials by anchoring them on the configured ledger and storing the result."""

    def __init__(self, settings: Settings, anchor_factory: AnchorBackendFactory, store: RecordStore):
        self.settings = settings
        self.anchor_factory = anchor_factory
        self.store = store

    def _backend(self) -> AnchorBackend:
        backend = self.anchor_factory.get_backend(self.settings.anchor_method)
        if backend is None:
            raise ConfigurationError("No anchoring method configured for credentials")
        return backend

    def _require_anchored_schema(self, schema_id: str):
        schema = self.store.get_schema(schema_id)
        if schema is None:
            logger.error(f"Credential issuance rejected: schema {schema_id} does not exist")
            raise ValidationError(f"Credential schema {schema_id} not found")
        if schema.blockchainStatus != BlockchainStatus.ANCHORED:
            logger.error(f"Credential issuance rejected: schema {schema_id} is {schema.blockchainStatus.value}")
            raise ValidationError(f"Credential schema {schema_id} is not anchored")

    def issue(self, request: IssueCredentialRequest) -> AnchoredCredential:
        if not request.credentialSchemaId:
            logger.error("Credential issuance rejected: credentialSchemaId is missing")
            raise ValidationError("credentialSchemaId is required to issue a credential")
        self._require_anchored_schema(request.credentialSchemaId)

        record = self._backend().anchor_credential(request)
        self.store.create_credential(record)
        logger.info(f"Issued credential {record.id} against schema {record.credentialSchemaId}")
        return record

    def get_credential(self, credential_id: str) -> AnchoredCredential:
        record = self.store.get_credential(credential_id)
        if record is None:
            raise NotFoundError(f"Credential with id {credential_id} not found")
        return record

    def verify_credential_by_id(self, credential_id: str) -> Dict[str, Any]:
        record = self.get_credential(credential_id)
        return self._backend().verify_credential(record.signed)
