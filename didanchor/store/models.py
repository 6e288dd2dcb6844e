from sqlalchemy import Column, String, Text, DateTime, func

from didanchor.store.database import Base


class IdentityModel(Base):
    __tablename__ = "identities"

    id = Column(String, primary_key=True, index=True, unique=True, nullable=False)
    did_doc_json = Column(Text, nullable=False)
    private_key_ref = Column(String, nullable=True)
    blockchain_status = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<IdentityModel(id='{self.id}', blockchain_status='{self.blockchain_status}')>"


class CredentialSchemaModel(Base):
    __tablename__ = "credential_schemas"

    id = Column(String, primary_key=True, index=True, unique=True, nullable=False)
    name = Column(String, nullable=True)
    version = Column(String, nullable=True)
    schema_json = Column(Text, nullable=False)
    tags_json = Column(Text, nullable=False, default="[]")
    status = Column(String, nullable=False)
    blockchain_status = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<CredentialSchemaModel(id='{self.id}', blockchain_status='{self.blockchain_status}')>"


class CredentialModel(Base):
    __tablename__ = "credentials"

    id = Column(String, primary_key=True, index=True, unique=True, nullable=False)
    type_json = Column(Text, nullable=True)
    issuer_json = Column(Text, nullable=False)
    issuance_date = Column(String, nullable=True)
    expiration_date = Column(String, nullable=True)
    subject_json = Column(Text, nullable=False)
    subject_id = Column(String, index=True, nullable=True)
    proof_json = Column(Text, nullable=True)
    credential_schema_id = Column(String, index=True, nullable=False)
    signed_json = Column(Text, nullable=False)
    tags_json = Column(Text, nullable=False, default="[]")
    blockchain_status = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<CredentialModel(id='{self.id}', credential_schema_id='{self.credential_schema_id}')>"
