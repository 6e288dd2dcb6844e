from typing import Dict, Optional

from didanchor.anchors.base import AnchorBackend
from didanchor.exceptions import UnsupportedMethodError
from didanchor.models import BlockchainMethod


class AnchorBackendFactory:
    """Resolves the anchoring backend for a blockchain method tag.

    The set of methods is closed: a new ledger means a new `BlockchainMethod`
    member and a backend registered here.
    """

    def __init__(self, backends: Dict[BlockchainMethod, AnchorBackend]):
        self._backends = dict(backends)

    def supports(self, method: Optional[str]) -> bool:
        if not method:
            return False
        return method in {m.value for m in self._backends}

    def get_backend(self, method: Optional[str] = None) -> Optional[AnchorBackend]:
        """Returns the backend for `method`, or None when no anchoring is requested."""
        if not method:
            return None
        try:
            return self._backends[BlockchainMethod(method)]
        except (ValueError, KeyError):
            raise UnsupportedMethodError(f"Unsupported blockchain method: {method}")
