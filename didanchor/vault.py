from abc import ABC, abstractmethod
from threading import Lock
from typing import Any, Dict, Optional

import hvac
import hvac.exceptions
import requests

from didanchor.config import Settings
from didanchor.exceptions import ConfigurationError, VaultError
from didanchor.logging import get_logger

logger = get_logger(__name__)


class SecretVault(ABC):
    """Custody of private key material. Secrets are never logged."""

    @abstractmethod
    def write_private_keys(self, did: str, secrets: Dict[str, Any]) -> str:
        """Stores the secrets of `did` and returns the reference kept on the identity record."""


class InMemorySecretVault(SecretVault):
    """Process-local vault for development and tests."""

    def __init__(self):
        self.secrets: Dict[str, Dict[str, Any]] = {}
        self._lock = Lock()

    def write_private_keys(self, did, secrets):
        with self._lock:
            self.secrets[did] = dict(secrets)
        return did


class HashicorpVault(SecretVault):
    """HashiCorp Vault KV v2 secrets engine, keyed by DID."""

    def __init__(self, settings: Settings, client: Optional[hvac.Client] = None):
        if not settings.vault_address or not settings.vault_token:
            raise ConfigurationError("Vault address and token are required for the hashicorp vault backend")
        self.mount_point = settings.vault_mount.strip("/")
        self.client = client or hvac.Client(
            url=settings.vault_address,
            token=settings.vault_token,
            timeout=settings.http_timeout,
        )

    def write_private_keys(self, did, secrets):
        try:
            self.client.secrets.kv.v2.create_or_update_secret(
                path=did,
                secret=secrets,
                mount_point=self.mount_point,
            )
        except hvac.exceptions.VaultError as e:
            logger.error(f"Vault rejected secret write for {did}: {type(e).__name__}")
            raise VaultError(f"Failed to write private keys for {did} to the vault")
        except requests.exceptions.RequestException as e:
            logger.error(f"Could not reach the vault to write secrets for {did}: {type(e).__name__} - {e}")
            raise VaultError(f"Failed to write private keys for {did} to the vault")
        logger.debug(f"Stored private keys for {did} under mount '{self.mount_point}'")
        return did


def create_vault(settings: Settings) -> SecretVault:
    backend = settings.vault_backend.lower()
    if backend == "memory":
        return InMemorySecretVault()
    if backend == "hashicorp":
        return HashicorpVault(settings)
    raise ConfigurationError(f"Unknown vault backend '{settings.vault_backend}'")
