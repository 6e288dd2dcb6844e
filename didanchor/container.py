from dataclasses import dataclass
from typing import Dict, Optional

import httpx

from didanchor.anchors.base import AnchorBackend
from didanchor.anchors.cord import CordAnchorClient
from didanchor.anchors.factory import AnchorBackendFactory
from didanchor.config import Settings
from didanchor.did.builder import DidDocumentBuilder
from didanchor.did.resolver import DidResolver
from didanchor.keys import KeyMaterialGenerator
from didanchor.models import BlockchainMethod
from didanchor.pipelines.credentials import CredentialAnchorPipeline
from didanchor.pipelines.schemas import SchemaAnchorPipeline
from didanchor.store.database import create_db_engine, create_session_factory, create_tables
from didanchor.store.records import RecordStore, SqlRecordStore
from didanchor.vault import SecretVault, create_vault


@dataclass
class Container:
    """Process-scoped components, built once from a Settings object."""
    settings: Settings
    http_client: httpx.Client
    store: RecordStore
    vault: SecretVault
    anchor_factory: AnchorBackendFactory
    key_generator: KeyMaterialGenerator
    did_builder: DidDocumentBuilder
    did_resolver: DidResolver
    credentials: CredentialAnchorPipeline
    schemas: SchemaAnchorPipeline

    def close(self):
        self.http_client.close()


def build_container(
    settings: Settings,
    backends: Optional[Dict[BlockchainMethod, AnchorBackend]] = None,
    store: Optional[RecordStore] = None,
    vault: Optional[SecretVault] = None,
) -> Container:
    """Wires every component. `backends`, `store` and `vault` override the defaults built from settings."""
    http_client = httpx.Client(timeout=settings.http_timeout)

    if store is None:
        engine = create_db_engine(settings.database_url)
        create_tables(engine)
        store = SqlRecordStore(create_session_factory(engine))
    if vault is None:
        vault = create_vault(settings)
    if backends is None:
        backends = {BlockchainMethod.CORD: CordAnchorClient(settings, http_client)}

    anchor_factory = AnchorBackendFactory(backends)
    key_generator = KeyMaterialGenerator()

    return Container(
        settings=settings,
        http_client=http_client,
        store=store,
        vault=vault,
        anchor_factory=anchor_factory,
        key_generator=key_generator,
        did_builder=DidDocumentBuilder(settings, key_generator, anchor_factory, vault, store),
        did_resolver=DidResolver(settings, store),
        credentials=CredentialAnchorPipeline(settings, anchor_factory, store),
        schemas=SchemaAnchorPipeline(settings, anchor_factory, store),
    )
