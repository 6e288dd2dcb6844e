from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

import base58
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from nacl.signing import SigningKey, VerifyKey

from didanchor.exceptions import ValidationError
from didanchor.models import VerificationKeyType

# Multicodec varint prefixes
ED25519_PUB_PREFIX = bytes([0xed, 0x01])
ED25519_PRIV_PREFIX = bytes([0x80, 0x26])
RSA_PUB_PREFIX = bytes([0x85, 0x24])

RSA_KEY_SIZE = 2048

DEFAULT_KEY_TYPE = VerificationKeyType.ED25519_2020

ED25519_TYPES = (VerificationKeyType.ED25519_2020, VerificationKeyType.ED25519_2018)

CONTEXTS = {
    VerificationKeyType.ED25519_2020: "https://w3id.org/security/suites/ed25519-2020/v1",
    VerificationKeyType.ED25519_2018: "https://w3id.org/security/suites/ed25519-2018/v1",
    VerificationKeyType.RSA_2018: "https://w3id.org/security/suites/jws-2020/v1",
}


@dataclass
class KeyMaterial:
    public_key_multibase: str
    verification_method_type: str
    # Secret; goes to the vault and nowhere else
    private_key_material: Dict[str, Any] = field(repr=False)


def to_multibase(data: bytes) -> str:
    """Encodes bytes as base58btc multibase ('z' prefix)."""
    return "z" + base58.b58encode(data).decode("ascii")


def from_multibase(value: str) -> bytes:
    if not value:
        raise ValidationError("Multibase string cannot be empty.")
    if not value.startswith("z"):
        raise ValidationError(f"Only base58btc multibase ('z' prefix) is supported, got '{value[:8]}...'.")
    try:
        return base58.b58decode(value[1:])
    except ValueError as e:
        raise ValidationError(f"Invalid base58 in multibase string: {e}")


def resolve_key_type(key_pair_type: Optional[Union[str, VerificationKeyType]]) -> VerificationKeyType:
    if key_pair_type is None:
        return DEFAULT_KEY_TYPE
    try:
        return VerificationKeyType(key_pair_type)
    except ValueError:
        supported = ", ".join(t.value for t in VerificationKeyType)
        raise ValidationError(f"Unsupported key pair type '{key_pair_type}'. Supported types: {supported}.")


def get_verify_key_from_multibase(pk_multibase: str) -> VerifyKey:
    """Decodes a multibase Ed25519 public key and returns a PyNaCl VerifyKey object.
    Handles common multicodec prefixes for Ed25519 public keys.
    """
    multicodec_pubkey = from_multibase(pk_multibase)

    # 0xed01 for full 34-byte key (prefix + key), or a raw 32-byte key
    if multicodec_pubkey.startswith(ED25519_PUB_PREFIX) and len(multicodec_pubkey) == 34:
        public_key_bytes = multicodec_pubkey[2:]
    elif len(multicodec_pubkey) == 32:
        public_key_bytes = multicodec_pubkey
    else:
        raise ValidationError(f"Invalid Ed25519 multicodec prefix or key length in publicKeyMultibase '{pk_multibase}'. Decoded length: {len(multicodec_pubkey)} bytes.")

    return VerifyKey(public_key_bytes)


def get_rsa_public_key_from_multibase(pk_multibase: str) -> rsa.RSAPublicKey:
    """Decodes a multibase RSA public key (multicodec 0x1205 + PKCS#1 DER)."""
    multicodec_pubkey = from_multibase(pk_multibase)
    if not multicodec_pubkey.startswith(RSA_PUB_PREFIX):
        raise ValidationError(f"publicKeyMultibase '{pk_multibase[:16]}...' is not an RSA multicodec key.")
    try:
        public_key = serialization.load_der_public_key(multicodec_pubkey[len(RSA_PUB_PREFIX):])
    except ValueError as e:
        raise ValidationError(f"Invalid RSA public key DER: {e}")
    if not isinstance(public_key, rsa.RSAPublicKey):
        raise ValidationError("Decoded public key is not an RSA key.")
    return public_key


def public_key_from_multibase(pk_multibase: str, key_pair_type: Union[str, VerificationKeyType]):
    """Decodes a publicKeyMultibase and checks it matches the declared verification method type."""
    key_type = resolve_key_type(key_pair_type)
    if key_type in ED25519_TYPES:
        return get_verify_key_from_multibase(pk_multibase)
    return get_rsa_public_key_from_multibase(pk_multibase)


class KeyMaterialGenerator:
    """Produces key pairs and multibase public keys for the supported verification key types."""

    def generate(self, key_pair_type: Optional[Union[str, VerificationKeyType]] = None) -> KeyMaterial:
        key_type = resolve_key_type(key_pair_type)
        if key_type in ED25519_TYPES:
            return self._generate_ed25519(key_type)
        return self._generate_rsa(key_type)

    def _generate_ed25519(self, key_type: VerificationKeyType) -> KeyMaterial:
        signing_key = SigningKey.generate()
        public_bytes = bytes(signing_key.verify_key)
        return KeyMaterial(
            public_key_multibase=to_multibase(ED25519_PUB_PREFIX + public_bytes),
            verification_method_type=key_type.value,
            private_key_material={
                "type": key_type.value,
                "privateKeyMultibase": to_multibase(ED25519_PRIV_PREFIX + bytes(signing_key)),
            },
        )

    def _generate_rsa(self, key_type: VerificationKeyType) -> KeyMaterial:
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=RSA_KEY_SIZE)
        public_der = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.PKCS1,
        )
        private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        return KeyMaterial(
            public_key_multibase=to_multibase(RSA_PUB_PREFIX + public_der),
            verification_method_type=key_type.value,
            private_key_material={
                "type": key_type.value,
                "privateKeyPem": private_pem.decode("ascii"),
            },
        )
