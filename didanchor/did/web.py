from typing import Optional
from urllib.parse import quote, urlparse

from didanchor.exceptions import ConfigurationError

WEB_DID_PREFIX = "did:web:"


def to_web_did_prefix(base: Optional[str]) -> Optional[str]:
    """Turns a web DID base into an id prefix ending with ':'.

    Accepts either a prefix (did:web:example.com:identity) or the URL the documents
    are served under (https://example.com/identity). A port is percent-encoded as
    the did:web method requires.
    """
    if not base:
        return None
    if base.startswith(WEB_DID_PREFIX):
        return base if base.endswith(":") else f"{base}:"

    parsed = urlparse(base if "://" in base else f"https://{base}")
    if not parsed.hostname:
        raise ConfigurationError(f"Invalid web did base url: {base}")
    host = parsed.hostname
    if parsed.port:
        host = f"{host}%3A{parsed.port}"
    segments = [quote(segment) for segment in parsed.path.split("/") if segment]
    return WEB_DID_PREFIX + ":".join([host] + segments) + ":"


def get_web_did_id_for_id(prefix: Optional[str], id: str) -> str:
    if not prefix:
        raise ConfigurationError("Web did base url not found")
    return f"{prefix}{id}"
