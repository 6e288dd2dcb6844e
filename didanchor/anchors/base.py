from abc import ABC, abstractmethod
from typing import Any, Dict

from didanchor.models import (
    AnchoredCredential,
    AnchoredDid,
    AnchoredSchema,
    GenerateDidDescriptor,
    IssueCredentialRequest,
)


class AnchorBackend(ABC):
    """Contract every ledger integration satisfies.

    Anchoring calls are writes with side effects on the ledger and are never retried
    here; `verify_credential` is read-only and safe for callers to retry.
    Implementations hold no per-request state and are shared across requests.
    """

    @abstractmethod
    def anchor_did(self, descriptor: GenerateDidDescriptor) -> AnchoredDid:
        """Anchors a DID and returns the ledger's document and key material."""

    @abstractmethod
    def anchor_schema(self, schema: Dict[str, Any]) -> AnchoredSchema:
        """Anchors a credential schema and returns the ledger-assigned id."""

    @abstractmethod
    def anchor_credential(self, request: IssueCredentialRequest) -> AnchoredCredential:
        """Anchors a credential and returns the record to persist."""

    @abstractmethod
    def verify_credential(self, credential: Dict[str, Any]) -> Dict[str, Any]:
        """Verifies an anchored credential envelope."""
