import json
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from didanchor.models import AnchoredCredential, CredentialSchemaRecord
from didanchor.store import models as db_models


def get_identity(db: Session, did: str) -> Optional[db_models.IdentityModel]:
    """Retrieves an identity from the database by its DID."""
    return db.query(db_models.IdentityModel).filter(db_models.IdentityModel.id == did).first()

def create_identity(
    db: Session,
    did: str,
    document: Dict[str, Any],
    private_key_ref: Optional[str] = None,
    blockchain_status: Optional[str] = None,
) -> db_models.IdentityModel:
    """Stores a DID document under its DID, with the vault reference of its private keys."""
    db_identity = db_models.IdentityModel(
        id=did,
        did_doc_json=json.dumps(document),
        private_key_ref=private_key_ref,
        blockchain_status=blockchain_status,
    )
    db.add(db_identity)
    db.commit()
    db.refresh(db_identity)
    return db_identity


def get_schema(db: Session, schema_id: str) -> Optional[db_models.CredentialSchemaModel]:
    return db.query(db_models.CredentialSchemaModel).filter(db_models.CredentialSchemaModel.id == schema_id).first()

def create_schema(db: Session, record: CredentialSchemaRecord) -> db_models.CredentialSchemaModel:
    db_schema = db_models.CredentialSchemaModel(
        id=record.id,
        name=record.schema_.get("name"),
        version=record.schema_.get("version"),
        schema_json=json.dumps(record.schema_),
        tags_json=json.dumps(record.tags),
        status=record.status,
        blockchain_status=record.blockchainStatus.value,
    )
    db.add(db_schema)
    db.commit()
    db.refresh(db_schema)
    return db_schema

def schema_to_record(db_schema: db_models.CredentialSchemaModel) -> CredentialSchemaRecord:
    return CredentialSchemaRecord(
        id=db_schema.id,
        schema=json.loads(db_schema.schema_json),
        tags=json.loads(db_schema.tags_json),
        status=db_schema.status,
        blockchainStatus=db_schema.blockchain_status,
    )


def get_credential(db: Session, credential_id: str) -> Optional[db_models.CredentialModel]:
    return db.query(db_models.CredentialModel).filter(db_models.CredentialModel.id == credential_id).first()

def create_credential(db: Session, record: AnchoredCredential) -> db_models.CredentialModel:
    """Stores an anchored credential, keeping the full ledger envelope in `signed_json`."""
    db_credential = db_models.CredentialModel(
        id=record.id,
        type_json=json.dumps(record.type) if record.type is not None else None,
        issuer_json=json.dumps(record.issuer),
        issuance_date=record.issuanceDate,
        expiration_date=record.expirationDate,
        subject_json=json.dumps(record.subject),
        subject_id=record.subjectId,
        proof_json=json.dumps(record.proof) if record.proof is not None else None,
        credential_schema_id=record.credentialSchemaId,
        signed_json=json.dumps(record.signed),
        tags_json=json.dumps(record.tags),
        blockchain_status=record.blockchainStatus.value,
    )
    db.add(db_credential)
    db.commit()
    db.refresh(db_credential)
    return db_credential

def credential_to_record(db_credential: db_models.CredentialModel) -> AnchoredCredential:
    return AnchoredCredential(
        id=db_credential.id,
        type=json.loads(db_credential.type_json) if db_credential.type_json else None,
        issuer=json.loads(db_credential.issuer_json),
        issuanceDate=db_credential.issuance_date,
        expirationDate=db_credential.expiration_date,
        subject=json.loads(db_credential.subject_json),
        subjectId=db_credential.subject_id,
        proof=json.loads(db_credential.proof_json) if db_credential.proof_json else None,
        credentialSchemaId=db_credential.credential_schema_id,
        signed=json.loads(db_credential.signed_json),
        tags=json.loads(db_credential.tags_json),
        blockchainStatus=db_credential.blockchain_status,
    )
