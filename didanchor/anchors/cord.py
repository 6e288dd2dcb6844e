from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from didanchor.anchors.base import AnchorBackend
from didanchor.config import Settings
from didanchor.exceptions import (
    AnchorError,
    ConfigurationError,
    ValidationError,
    VerificationFailedError,
)
from didanchor.logging import get_logger
from didanchor.models import (
    AnchoredCredential,
    AnchoredDid,
    AnchoredSchema,
    BlockchainMethod,
    BlockchainStatus,
    GenerateDidDescriptor,
    IssueCredentialRequest,
)

logger = get_logger(__name__)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def _upstream_detail(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        for key in ("details", "detail", "message", "error"):
            if body.get(key):
                return str(body[key])
    return None


class CordAnchorClient(AnchorBackend):
    """Anchors DIDs, schemas and credentials on CORD through the issuer agent's HTTP API."""

    def __init__(self, settings: Settings, client: httpx.Client):
        self.settings = settings
        self.client = client

    def _issuer_url(self, path: str) -> str:
        if not self.settings.issuer_agent_base_url:
            raise ConfigurationError("Issuer agent base url not found")
        return f"{self.settings.issuer_agent_base_url.rstrip('/')}{path}"

    def _verification_url(self, path: str) -> str:
        if not self.settings.verification_middleware_base_url:
            raise ConfigurationError("Verification middleware base url not found")
        return f"{self.settings.verification_middleware_base_url.rstrip('/')}{path}"

    def _post(self, url: str, payload: Any, what: str) -> Dict[str, Any]:
        """POSTs a ledger write once and returns the decoded JSON body."""
        try:
            response = self.client.post(url, json=payload)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            body = _response_body(e.response)
            logger.error(f"Ledger agent rejected {what}: {e.response.status_code} - {body}")
            detail = _upstream_detail(body)
            message = f"Failed to anchor {what} to CORD blockchain"
            raise AnchorError(
                f"{message}: {detail}" if detail else message,
                upstream_status=e.response.status_code,
                upstream_body=body,
            )
        except httpx.RequestError as e:
            logger.error(f"Request error anchoring {what} to {url}: {type(e).__name__} - {e}")
            raise AnchorError(f"Failed to anchor {what} to CORD blockchain: {type(e).__name__}")
        except ValueError as e:
            logger.error(f"Ledger agent returned a non-JSON body while anchoring {what}: {e}")
            raise AnchorError(f"Malformed response from ledger agent while anchoring {what}")

    def anchor_did(self, descriptor: GenerateDidDescriptor) -> AnchoredDid:
        if descriptor.method != BlockchainMethod.CORD.value:
            raise ValidationError('Invalid method: only "cord" is allowed for anchoring to Cord.')

        data = self._post(
            self._issuer_url("/did/create/"),
            descriptor.model_dump(mode="json", exclude_none=True),
            "DID",
        )
        try:
            return AnchoredDid.model_validate(data["result"])
        except (KeyError, TypeError, PydanticValidationError) as e:
            logger.error(f"Unexpected DID anchoring response shape: {type(e).__name__} - {e}")
            raise AnchorError("Malformed DID anchoring response from ledger agent", upstream_body=data)

    def anchor_schema(self, schema: Dict[str, Any]) -> AnchoredSchema:
        data = self._post(self._issuer_url("/schema"), schema, "schema")
        schema_id = data.get("schemaId") if isinstance(data, dict) else None
        if not schema_id:
            logger.error(f"Schema anchoring response is missing schemaId: {data}")
            raise AnchorError("Malformed schema anchoring response from ledger agent", upstream_body=data)
        return AnchoredSchema(schemaId=schema_id, raw=data)

    def anchor_credential(self, request: IssueCredentialRequest) -> AnchoredCredential:
        if not request.credentialSchemaId:
            logger.error("Credential schema id is required for anchoring but is missing")
            raise ValidationError("Cord Schema ID is missing")

        logger.debug(f"Anchoring credential to CORD with schema id {request.credentialSchemaId}")
        credential_payload = {
            **request.credential,
            "schemaId": request.credentialSchemaId,
        }
        data = self._post(self._issuer_url("/cred"), {"credential": credential_payload}, "credential")

        try:
            vc = data["result"]["vc"]
            credential_subject = vc["credentialSubject"]
            return AnchoredCredential(
                id=vc["id"],
                type=request.credential.get("type"),
                issuer=vc["issuer"],
                issuanceDate=vc.get("issuanceDate"),
                expirationDate=vc.get("validUntil"),
                subject=credential_subject,
                subjectId=credential_subject.get("id"),
                proof=vc.get("proof"),
                credentialSchemaId=request.credentialSchemaId,
                signed=vc,
                tags=request.tags,
                blockchainStatus=BlockchainStatus.ANCHORED,
            )
        except (KeyError, TypeError, AttributeError, PydanticValidationError) as e:
            logger.error(f"Unexpected credential anchoring response shape: {type(e).__name__} - {e}")
            raise AnchorError("Malformed credential anchoring response from ledger agent", upstream_body=data)

    def verify_credential(self, credential: Dict[str, Any]) -> Dict[str, Any]:
        url = self._verification_url("/credentials/verify")
        logger.debug(f"Verifying credential {credential.get('id')} at {url}")
        try:
            response = self.client.post(url, json=credential)
        except httpx.RequestError as e:
            logger.error(f"Error calling CORD verification API: {type(e).__name__} - {e}")
            raise AnchorError(f"Error verifying credential on Cord: {type(e).__name__}")

        body = _response_body(response)
        if response.status_code != 200:
            logger.error(f"Cord verification failed: {response.status_code} - {body}")
            raise VerificationFailedError(
                "Cord verification failed",
                upstream_status=response.status_code,
                upstream_body=body,
            )
        return body
