from typing import Any, Optional


class DidAnchorError(Exception):
    """Base class for exceptions raised by the anchoring and resolution core.

    `kind` names the error category so callers can branch on it; `status_code`
    is the HTTP status the API layer answers with.
    """
    kind = "error"
    status_code = 500


class ValidationError(DidAnchorError):
    """Raised when input is malformed or incomplete, before any network call."""
    kind = "validation"
    status_code = 400


class UnsupportedMethodError(DidAnchorError):
    """Raised when no anchoring backend is registered for a method tag."""
    kind = "unsupported_method"
    status_code = 400


class ConfigurationError(DidAnchorError):
    """Raised when a required base URL or prefix is not configured."""
    kind = "configuration"
    status_code = 500


class AnchorError(DidAnchorError):
    """Raised when a ledger write fails.

    Carries the upstream HTTP status and body when the ledger agent answered.
    """
    kind = "anchor"
    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None, upstream_body: Any = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body


class VerificationFailedError(DidAnchorError):
    """Raised when the ledger verification call reports a non-success outcome."""
    kind = "verification_failed"
    status_code = 422

    def __init__(self, message: str, upstream_status: Optional[int] = None, upstream_body: Any = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body


class VaultError(DidAnchorError):
    """Raised when secret material cannot be written to or read from the vault."""
    kind = "vault"


class PersistenceError(DidAnchorError):
    """Raised when the record store fails to read or write a record."""
    kind = "persistence"


class NotFoundError(DidAnchorError):
    """Raised when no record matches the requested identifier."""
    kind = "not_found"
    status_code = 404
