import pytest

from didanchor.anchors.base import AnchorBackend
from didanchor.anchors.factory import AnchorBackendFactory
from didanchor.config import Settings
from didanchor.did.builder import DidDocumentBuilder
from didanchor.did.resolver import DidResolver
from didanchor.keys import KeyMaterialGenerator
from didanchor.models import BlockchainMethod
from didanchor.store.database import create_db_engine, create_session_factory, create_tables
from didanchor.store.records import SqlRecordStore
from didanchor.vault import InMemorySecretVault

ISSUER_AGENT_URL = "http://issuer-agent.test"
VERIFICATION_URL = "http://verification.test"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        issuer_agent_base_url=ISSUER_AGENT_URL,
        verification_middleware_base_url=VERIFICATION_URL,
        web_did_base_url=None,
        anchor_method="cord",
        log_format="text",
    )


@pytest.fixture
def store():
    engine = create_db_engine("sqlite://")
    create_tables(engine)
    yield SqlRecordStore(create_session_factory(engine))
    engine.dispose()


@pytest.fixture
def vault():
    return InMemorySecretVault()


@pytest.fixture
def mock_backend(mocker):
    return mocker.create_autospec(AnchorBackend, instance=True)


@pytest.fixture
def anchor_factory(mock_backend):
    return AnchorBackendFactory({BlockchainMethod.CORD: mock_backend})


@pytest.fixture
def builder(settings, anchor_factory, vault, store):
    return DidDocumentBuilder(settings, KeyMaterialGenerator(), anchor_factory, vault, store)


@pytest.fixture
def resolver(settings, store):
    return DidResolver(settings, store)
