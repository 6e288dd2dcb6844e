import pytest

from didanchor.exceptions import (
    AnchorError,
    ConfigurationError,
    PersistenceError,
    ValidationError,
    VaultError,
)
from didanchor.did.builder import DidDocumentBuilder
from didanchor.keys import KeyMaterial, KeyMaterialGenerator
from didanchor.models import AnchoredDid, GenerateDidDescriptor

DEFAULT_DESCRIPTOR = {
    "alsoKnownAs": ["C4GT", "https://www.codeforgovtech.in/"],
    "services": [
        {
            "id": "C4GT",
            "type": "IdentityHub",
            "serviceEndpoint": {
                "@context": "schema.c4gt.acknowledgment",
                "@type": "UserServiceEndpoint",
                "instance": ["https://www.codeforgovtech.in"],
            },
        }
    ],
    "method": "C4GT",
}

CORD_DOCUMENT = {
    "uri": "did:cord:test123",
    "authentication": ["did:cord:test123#key-1"],
    "keyAgreement": ["did:cord:test123#key-2"],
    "capabilityDelegation": ["did:cord:test123#key-3"],
    "assertionMethod": ["did:cord:test123#key-4"],
}


def descriptor(**overrides):
    data = {**DEFAULT_DESCRIPTOR, **overrides}
    return GenerateDidDescriptor(**{k: v for k, v in data.items() if v is not None})


def test_generate_custom_method(builder, mock_backend):
    """A custom method is generated locally, with no ledger call."""
    document = builder.generate(descriptor())

    assert document["id"].split(":")[1] == "C4GT"
    verification_method = document["verificationMethod"][0]
    assert verification_method["publicKeyMultibase"]
    assert verification_method["controller"] == document["id"]
    assert verification_method["type"] == "Ed25519VerificationKey2020"
    mock_backend.anchor_did.assert_not_called()


def test_generate_default_method(builder):
    doc = descriptor()
    doc.method = None
    document = builder.generate(doc)

    assert document["id"].split(":")[1] == "rcw"


def test_document_assembly(builder):
    """alsoKnownAs and services are copied verbatim; references point at the document's key."""
    document = builder.generate(descriptor())

    assert document["alsoKnownAs"] == DEFAULT_DESCRIPTOR["alsoKnownAs"]
    assert document["service"] == DEFAULT_DESCRIPTOR["services"]
    key_ids = {vm["id"] for vm in document["verificationMethod"]}
    for relationship in ("authentication", "assertionMethod", "capabilityInvocation", "capabilityDelegation"):
        assert document[relationship]
        assert set(document[relationship]) <= key_ids
    assert document["@context"][0] == "https://www.w3.org/ns/did/v1"


def test_generate_rsa_key(builder):
    document = builder.generate(descriptor(method="abc", keyPairType="RsaVerificationKey2018"))
    assert document["verificationMethod"][0]["type"] == "RsaVerificationKey2018"


def test_generate_unknown_key_type(builder, store):
    with pytest.raises(ValidationError):
        builder.generate(descriptor(keyPairType="EcdsaSecp256k1"))


def test_generate_writes_private_key_to_vault(builder, vault):
    document = builder.generate(descriptor())

    secrets = vault.secrets[document["id"]]
    assert secrets["privateKeyMultibase"].startswith("z")
    assert "privateKeyMultibase" not in str(document)


def test_generate_web_did_with_base_url(builder):
    document = builder.generate(descriptor(
        method="web",
        webDidBaseUrl="https://registry.dev.example.com/identity",
        keyPairType="Ed25519VerificationKey2018",
    ))

    assert document["id"].startswith("did:web:registry.dev.example.com:identity:")
    assert document["verificationMethod"][0]["type"] == "Ed25519VerificationKey2018"


def test_generate_web_did_with_configured_prefix(builder, settings):
    settings.web_did_base_url = "did:web:example.com:identity:"

    document = builder.generate(GenerateDidDescriptor(alsoKnownAs=[], services=[], method="web"))

    assert document["id"].split(":")[1] == "web"
    assert document["id"].startswith("did:web:example.com:identity:")


def test_generate_web_did_with_explicit_id(builder, settings):
    settings.web_did_base_url = "did:web:example.com:identity:"

    document = builder.generate(descriptor(method="web", id="abc"))

    assert document["id"] == "did:web:example.com:identity:abc"


def test_generate_web_did_with_full_did(builder):
    """A full DID given as id is used as is, even without a configured prefix."""
    document = builder.generate(descriptor(method="web", id="did:web:abc.com:given:1234"))
    assert document["id"] == "did:web:abc.com:given:1234"


def test_generate_web_did_without_prefix(builder, store):
    with pytest.raises(ConfigurationError, match="Web did base url not found"):
        builder.generate(descriptor(method="web"))


def test_get_web_did_id_for_id(builder, settings):
    settings.web_did_base_url = "did:web:example.com:identity:"
    assert builder.get_web_did_id_for_id("abc") == "did:web:example.com:identity:abc"


def test_get_web_did_id_for_id_without_prefix(builder):
    with pytest.raises(ConfigurationError, match="Web did base url not found"):
        builder.get_web_did_id_for_id("abc")


def test_generate_did_uri_web(builder, settings):
    settings.web_did_base_url = "did:web:example.com:identity:"
    assert "did:web:example.com:identity" in builder.generate_did_uri("web")


def test_generate_many(builder):
    documents = builder.generate_many([descriptor(), descriptor(method="other")])
    assert [d["id"].split(":")[1] for d in documents] == ["C4GT", "other"]


def test_generate_anchored_did(builder, mock_backend, anchor_factory, store, vault, mocker):
    """A ledger method returns the ledger's document verbatim and stores it."""
    mock_backend.anchor_did.return_value = AnchoredDid(
        document=CORD_DOCUMENT, mnemonic="mock-mnemonic", delegateKeys=["key1", "key2"],
    )
    spy = mocker.spy(anchor_factory, "get_backend")
    cord_descriptor = descriptor(method="cord")

    document = builder.generate(cord_descriptor)

    assert document == CORD_DOCUMENT
    spy.assert_called_once_with("cord")
    mock_backend.anchor_did.assert_called_once_with(cord_descriptor)
    assert store.get_identity_document("did:cord:test123") == CORD_DOCUMENT
    assert vault.secrets["did:cord:test123"] == {
        "mnemonic": "mock-mnemonic",
        "delegateKeys": ["key1", "key2"],
    }


def test_generate_anchored_did_anchor_failure(builder, mock_backend, store, mocker):
    mock_backend.anchor_did.side_effect = AnchorError("Failed to anchor DID to CORD blockchain")
    create_identity = mocker.spy(store, "create_identity")

    with pytest.raises(AnchorError):
        builder.generate(descriptor(method="cord"))

    create_identity.assert_not_called()
    assert store.get_identity_document("did:cord:test123") is None


def test_generate_anchored_did_vault_failure(builder, mock_backend, vault, store, mocker):
    mock_backend.anchor_did.return_value = AnchoredDid(document={"uri": "did:cord:test123"}, mnemonic="m")
    mocker.patch.object(vault, "write_private_keys", side_effect=VaultError("Vault Error"))

    with pytest.raises(VaultError):
        builder.generate(descriptor(method="cord"))
    assert store.get_identity_document("did:cord:test123") is None


def test_generate_anchored_did_store_failure(builder, mock_backend, store, mocker):
    mock_backend.anchor_did.return_value = AnchoredDid(document={"uri": "did:cord:test123"}, mnemonic="m")
    mocker.patch.object(store, "create_identity", side_effect=PersistenceError("Database Error"))

    with pytest.raises(PersistenceError):
        builder.generate(descriptor(method="cord"))


def test_generate_anchored_did_without_identifier(builder, mock_backend, store):
    mock_backend.anchor_did.return_value = AnchoredDid(document={"authentication": []})

    with pytest.raises(AnchorError, match="no identifier"):
        builder.generate(descriptor(method="cord"))


def test_generate_duplicate_explicit_id(builder):
    """The record store rejects a second document under the same DID."""
    builder.generate(descriptor(id="did:C4GT:fixed"))
    with pytest.raises(PersistenceError):
        builder.generate(descriptor(id="did:C4GT:fixed"))


def test_generate_rejects_key_of_wrong_type(settings, anchor_factory, vault, store, mocker):
    """A public key that does not decode for its declared type never reaches a document."""
    ed25519_key = KeyMaterialGenerator().generate()
    key_generator = mocker.create_autospec(KeyMaterialGenerator, instance=True)
    key_generator.generate.return_value = KeyMaterial(
        public_key_multibase=ed25519_key.public_key_multibase,
        verification_method_type="RsaVerificationKey2018",
        private_key_material={},
    )
    builder = DidDocumentBuilder(settings, key_generator, anchor_factory, vault, store)

    with pytest.raises(ValidationError, match="not an RSA multicodec key"):
        builder.generate(descriptor(id="did:C4GT:mismatch"))
    assert vault.secrets == {}
    assert store.get_identity_document("did:C4GT:mismatch") is None
