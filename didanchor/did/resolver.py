from typing import Any, Dict, Optional

from didanchor.config import Settings
from didanchor.did.web import WEB_DID_PREFIX, get_web_did_id_for_id, to_web_did_prefix
from didanchor.exceptions import NotFoundError
from didanchor.logging import get_logger
from didanchor.store.records import RecordStore

logger = get_logger(__name__)


class DidResolver:
    """Resolves DIDs to the documents held in the record store."""

    def __init__(self, settings: Settings, store: RecordStore):
        self.settings = settings
        self.store = store

    @property
    def web_did_prefix(self) -> Optional[str]:
        return to_web_did_prefix(self.settings.web_did_base_url)

    def resolve(self, id: str) -> Dict[str, Any]:
        # The configured web base is only consulted for did:web ids
        if id.startswith(WEB_DID_PREFIX):
            prefix = self.web_did_prefix
            if prefix and id.startswith(prefix):
                return self.resolve_web(id[len(prefix):])
        return self._lookup(id)

    def resolve_web(self, suffix: str) -> Dict[str, Any]:
        return self._lookup(get_web_did_id_for_id(self.web_did_prefix, suffix))

    def _lookup(self, did: str) -> Dict[str, Any]:
        document = self.store.get_identity_document(did)
        if document is None:
            logger.info(f"DID {did} not found")
            raise NotFoundError(f"DID: {did} not found")
        return document
