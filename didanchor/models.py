from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class BlockchainMethod(str, Enum):
    CORD = "cord"


class BlockchainStatus(str, Enum):
    PENDING = "PENDING"
    ANCHORED = "ANCHORED"


class VerificationKeyType(str, Enum):
    ED25519_2020 = "Ed25519VerificationKey2020"
    ED25519_2018 = "Ed25519VerificationKey2018"
    RSA_2018 = "RsaVerificationKey2018"


WEB_DID_METHOD = "web"

# === DID Document Models ===

class VerificationMethod(BaseModel):
    id: str
    type: str
    controller: str
    publicKeyMultibase: str = Field(..., min_length=1)

class DIDService(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    serviceEndpoint: Any

class DIDDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    context: List[str] = Field(..., alias='@context')
    id: str
    alsoKnownAs: List[str] = []
    verificationMethod: List[VerificationMethod]
    authentication: List[str] = []
    assertionMethod: List[str] = []
    keyAgreement: List[str] = []
    capabilityInvocation: List[str] = []
    capabilityDelegation: List[str] = []
    service: List[DIDService] = []

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class GenerateDidDescriptor(BaseModel):
    """Input to DID generation. `keyPairType` stays a plain string so unknown tags
    are rejected by the key generator rather than by request parsing."""
    model_config = ConfigDict(extra="allow")

    alsoKnownAs: List[str] = []
    services: List[DIDService] = []
    method: Optional[str] = None
    id: Optional[str] = None
    keyPairType: Optional[str] = None
    webDidBaseUrl: Optional[str] = None


class GenerateDidRequest(BaseModel):
    content: List[GenerateDidDescriptor]


# === Anchoring results ===

class AnchoredDid(BaseModel):
    document: Dict[str, Any]
    mnemonic: Optional[str] = None
    delegateKeys: Optional[Any] = None


class AnchoredSchema(BaseModel):
    schemaId: str
    raw: Dict[str, Any]


class AnchoredCredential(BaseModel):
    id: str
    type: Optional[Union[str, List[str]]] = None
    issuer: Any
    issuanceDate: Optional[str] = None
    expirationDate: Optional[str] = None
    subject: Dict[str, Any]
    subjectId: Optional[str] = None
    proof: Optional[Any] = None
    credentialSchemaId: str
    signed: Dict[str, Any]
    tags: List[str] = []
    blockchainStatus: BlockchainStatus = BlockchainStatus.ANCHORED


# === Schemas and credentials ===

class CreateSchemaRequest(BaseModel):
    schema_: Dict[str, Any] = Field(..., alias="schema")
    tags: List[str] = []
    status: str = "DRAFT"

    model_config = ConfigDict(populate_by_name=True)


class CredentialSchemaRecord(BaseModel):
    id: str
    schema_: Dict[str, Any] = Field(..., alias="schema")
    tags: List[str] = []
    status: str = "DRAFT"
    blockchainStatus: BlockchainStatus = BlockchainStatus.PENDING

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class IssueCredentialRequest(BaseModel):
    credential: Dict[str, Any]
    credentialSchemaId: Optional[str] = None
    credentialSchemaVersion: Optional[str] = None
    tags: List[str] = []
