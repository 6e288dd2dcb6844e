from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Request

from didanchor.container import Container
from didanchor.logging import get_logger
from didanchor.models import (
    AnchoredCredential,
    CreateSchemaRequest,
    GenerateDidRequest,
    IssueCredentialRequest,
)

logger = get_logger(__name__)

router = APIRouter()


def get_container(request: Request) -> Container:
    """Dependency returning the components built at application start."""
    return request.app.state.container


@router.post("/did/generate", response_model=List[Dict[str, Any]], tags=["DID"])
def generate_did(body: GenerateDidRequest, container: Container = Depends(get_container)):
    """
    Generates one DID per descriptor in `content`.

    - **method**: `web`, a ledger method (`cord`) or any custom method tag; defaults to the configured one.
    - **id**: optional explicit id or id suffix.
    """
    return container.did_builder.generate_many(body.content)


@router.get("/did/resolve/{did:path}", response_model=Dict[str, Any], tags=["DID"])
def resolve_did(did: str, container: Container = Depends(get_container)):
    """Resolves a DID to its stored DID document."""
    return container.did_resolver.resolve(did)


@router.post("/credential-schema", response_model=Dict[str, Any], tags=["Credential Schema"])
def create_credential_schema(body: CreateSchemaRequest, container: Container = Depends(get_container)):
    """Creates a credential schema, anchoring it when a ledger method is configured."""
    return container.schemas.create_schema(body)


@router.get("/credential-schema/{schema_id:path}", response_model=Dict[str, Any], tags=["Credential Schema"])
def get_credential_schema(schema_id: str, container: Container = Depends(get_container)):
    return container.schemas.get_schema(schema_id)


@router.post("/credentials/issue", response_model=AnchoredCredential, tags=["Credentials"])
def issue_credential(body: IssueCredentialRequest, container: Container = Depends(get_container)):
    """Anchors a credential on the configured ledger and stores it."""
    return container.credentials.issue(body)


@router.get("/credentials/{credential_id:path}/verify", response_model=Dict[str, Any], tags=["Credentials"])
def verify_credential(credential_id: str, container: Container = Depends(get_container)):
    """Verifies a stored credential against the ledger."""
    return container.credentials.verify_credential_by_id(credential_id)


@router.get("/credentials/{credential_id:path}", response_model=AnchoredCredential, tags=["Credentials"])
def get_credential(credential_id: str, container: Container = Depends(get_container)):
    return container.credentials.get_credential(credential_id)


@router.get("/{suffix}/did.json", response_model=Dict[str, Any], tags=["DID"])
def resolve_web_did(suffix: str, container: Container = Depends(get_container)):
    """Serves the document of a web DID by the id suffix under the configured prefix."""
    return container.did_resolver.resolve_web(suffix)
