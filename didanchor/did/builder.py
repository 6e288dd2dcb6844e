from typing import Any, Dict, List, Optional
from uuid import uuid4

from didanchor.anchors.factory import AnchorBackendFactory
from didanchor.config import Settings
from didanchor.did.web import get_web_did_id_for_id, to_web_did_prefix
from didanchor.exceptions import AnchorError
from didanchor.keys import (
    CONTEXTS,
    KeyMaterial,
    KeyMaterialGenerator,
    public_key_from_multibase,
    resolve_key_type,
)
from didanchor.logging import get_logger
from didanchor.models import (
    BlockchainStatus,
    DIDDocument,
    GenerateDidDescriptor,
    VerificationMethod,
    WEB_DID_METHOD,
)
from didanchor.store.records import RecordStore
from didanchor.vault import SecretVault

logger = get_logger(__name__)

DID_CONTEXT = "https://www.w3.org/ns/did/v1"
KEY_FRAGMENT = "key-0"


class DidDocumentBuilder:
    """Generates DID documents and hands them to the record store.

    Three strategies, chosen by `descriptor.method`:
      * "web": id under the configured web prefix, keys generated locally.
      * a ledger method known to the anchor factory: the ledger creates the document.
      * anything else (including no method): did:<method>:<uuid> with local keys.
    """

    def __init__(
        self,
        settings: Settings,
        key_generator: KeyMaterialGenerator,
        anchor_factory: AnchorBackendFactory,
        vault: SecretVault,
        store: RecordStore,
    ):
        self.settings = settings
        self.key_generator = key_generator
        self.anchor_factory = anchor_factory
        self.vault = vault
        self.store = store

    @property
    def web_did_prefix(self) -> Optional[str]:
        return to_web_did_prefix(self.settings.web_did_base_url)

    def get_web_did_id_for_id(self, id: str, base_url: Optional[str] = None) -> str:
        prefix = to_web_did_prefix(base_url) if base_url else self.web_did_prefix
        return get_web_did_id_for_id(prefix, id)

    def generate_did_uri(self, method: Optional[str] = None, base_url: Optional[str] = None) -> str:
        if method == WEB_DID_METHOD:
            return self.get_web_did_id_for_id(str(uuid4()), base_url)
        return f"did:{method or self.settings.default_did_method}:{uuid4()}"

    def generate(self, descriptor: GenerateDidDescriptor) -> Dict[str, Any]:
        if self.anchor_factory.supports(descriptor.method):
            return self._generate_anchored(descriptor)
        return self._generate_local(descriptor)

    def generate_many(self, descriptors: List[GenerateDidDescriptor]) -> List[Dict[str, Any]]:
        return [self.generate(descriptor) for descriptor in descriptors]

    def _generate_anchored(self, descriptor: GenerateDidDescriptor) -> Dict[str, Any]:
        backend = self.anchor_factory.get_backend(descriptor.method)
        anchored = backend.anchor_did(descriptor)

        document = anchored.document
        did = document.get("id") or document.get("uri")
        if not did:
            logger.error("Ledger returned a DID document without an id or uri")
            raise AnchorError("Anchored DID document has no identifier", upstream_body=document)

        # Ledger write has already happened; a failure below leaves the DID anchored without a local record.
        reference = self.vault.write_private_keys(did, {
            "mnemonic": anchored.mnemonic,
            "delegateKeys": anchored.delegateKeys,
        })
        self.store.create_identity(did, document, reference, BlockchainStatus.ANCHORED.value)
        logger.info(f"Anchored DID {did} on {descriptor.method}")
        return document

    def _generate_local(self, descriptor: GenerateDidDescriptor) -> Dict[str, Any]:
        did = self._local_did(descriptor)
        key_material = self.key_generator.generate(descriptor.keyPairType)

        document = self._assemble(did, key_material, descriptor)
        reference = self.vault.write_private_keys(did, key_material.private_key_material)
        self.store.create_identity(did, document, reference)
        logger.info(f"Generated DID {did}")
        return document

    def _local_did(self, descriptor: GenerateDidDescriptor) -> str:
        if descriptor.id and descriptor.id.startswith("did:"):
            return descriptor.id
        if descriptor.method == WEB_DID_METHOD:
            if descriptor.id:
                return self.get_web_did_id_for_id(descriptor.id, descriptor.webDidBaseUrl)
            return self.generate_did_uri(WEB_DID_METHOD, descriptor.webDidBaseUrl)
        if descriptor.id:
            return f"did:{descriptor.method or self.settings.default_did_method}:{descriptor.id}"
        return self.generate_did_uri(descriptor.method)

    def _assemble(self, did: str, key_material: KeyMaterial, descriptor: GenerateDidDescriptor) -> Dict[str, Any]:
        key_id = f"{did}#{KEY_FRAGMENT}"
        key_type = resolve_key_type(key_material.verification_method_type)
        public_key_from_multibase(key_material.public_key_multibase, key_type)
        document = DIDDocument(
            context=[DID_CONTEXT, CONTEXTS[key_type]],
            id=did,
            alsoKnownAs=descriptor.alsoKnownAs,
            verificationMethod=[
                VerificationMethod(
                    id=key_id,
                    type=key_material.verification_method_type,
                    controller=did,
                    publicKeyMultibase=key_material.public_key_multibase,
                )
            ],
            authentication=[key_id],
            assertionMethod=[key_id],
            capabilityInvocation=[key_id],
            capabilityDelegation=[key_id],
            service=descriptor.services,
        )
        return document.to_dict()
