import pytest

from didanchor.exceptions import AnchorError, NotFoundError
from didanchor.models import AnchoredSchema, CreateSchemaRequest
from didanchor.pipelines.schemas import SchemaAnchorPipeline


def schema_request():
    return CreateSchemaRequest(
        schema={
            "type": "https://w3c-ccg.github.io/vc-json-schemas/",
            "version": "1.0.0",
            "name": "Proof of Academic Evaluation Credential",
            "author": "did:cord:author",
            "authored": "2024-01-01T00:00:00Z",
            "schema": {
                "$schema": "https://json-schema.org/draft/2019-09/schema",
                "type": "object",
                "properties": {"grade": {"type": "string"}},
                "required": ["grade"],
            },
        },
        tags=["academic"],
    )


@pytest.fixture
def pipeline(settings, anchor_factory, store):
    return SchemaAnchorPipeline(settings, anchor_factory, store)


def test_create_schema_anchored(pipeline, mock_backend):
    """The ledger id becomes the schema id and the schema is marked ANCHORED."""
    mock_backend.anchor_schema.return_value = AnchoredSchema(
        schemaId="schema-id-blockchain", raw={"schemaId": "schema-id-blockchain"},
    )
    request = schema_request()

    result = pipeline.create_schema(request)

    mock_backend.anchor_schema.assert_called_once_with(request.schema_)
    assert result["schema"]["id"] == "schema-id-blockchain"
    assert result["blockchainStatus"] == "ANCHORED"
    assert result["tags"] == ["academic"]
    assert pipeline.get_schema("schema-id-blockchain") == result


def test_create_schema_anchor_failure(pipeline, mock_backend, store, mocker):
    mock_backend.anchor_schema.side_effect = AnchorError("Failed to anchor schema to Cord blockchain")
    create_schema = mocker.spy(store, "create_schema")

    with pytest.raises(AnchorError):
        pipeline.create_schema(schema_request())
    create_schema.assert_not_called()


def test_create_schema_without_anchoring(pipeline, settings, mock_backend):
    settings.anchor_method = None

    result = pipeline.create_schema(schema_request())

    mock_backend.anchor_schema.assert_not_called()
    assert result["blockchainStatus"] == "PENDING"
    assert result["schema"]["id"].startswith("did:schema:")


def test_get_schema_not_found(pipeline):
    with pytest.raises(NotFoundError, match="unknown-schema"):
        pipeline.get_schema("unknown-schema")
