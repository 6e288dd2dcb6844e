import json
from typing import Optional, Tuple

import click
from pydantic import ValidationError as PydanticValidationError

from didanchor.config import settings
from didanchor.container import build_container
from didanchor.exceptions import DidAnchorError
from didanchor.models import GenerateDidDescriptor


@click.group("did")
def did():
    """Generate and resolve DIDs"""
    pass


def _fail(message: str):
    click.echo(click.style(message, fg="red"), err=True)
    raise SystemExit(1)


@did.command("generate")
@click.option("--method", "-m", help="DID method: 'web', a ledger method such as 'cord', or a custom tag.")
@click.option("--id", "explicit_id", help="Explicit DID or id suffix.")
@click.option("--key-type", help="Verification key type (e.g. Ed25519VerificationKey2020).")
@click.option("--web-base-url", help="Base URL or did:web prefix for web DIDs.")
@click.option("--also-known-as", "also_known_as", multiple=True, help="alsoKnownAs entry; repeatable.")
@click.option(
    "--services-file",
    type=click.Path(exists=True, dir_okay=False, readable=True),
    help="JSON file with a list of service entries.",
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, writable=True),
    help="Output file for the DID document (JSON).",
)
def generate(
    method: Optional[str],
    explicit_id: Optional[str],
    key_type: Optional[str],
    web_base_url: Optional[str],
    also_known_as: Tuple[str, ...],
    services_file: Optional[str],
    output_file: Optional[str],
):
    """Generates a DID and stores its document."""
    services = []
    if services_file:
        try:
            with open(services_file, "r") as f:
                services = json.load(f)
        except json.JSONDecodeError as e:
            _fail(f"Error: Invalid JSON in services file {services_file}: {e}")

    try:
        descriptor = GenerateDidDescriptor(
            method=method,
            id=explicit_id,
            keyPairType=key_type,
            webDidBaseUrl=web_base_url,
            alsoKnownAs=list(also_known_as),
            services=services,
        )
    except PydanticValidationError as e:
        _fail(f"Error: Invalid DID descriptor: {e}")

    container = build_container(settings)
    try:
        document = container.did_builder.generate(descriptor)
    except DidAnchorError as e:
        _fail(f"Error ({e.kind}): {e}")
    finally:
        container.close()

    click.echo(click.style(f"Generated DID: {document.get('id') or document.get('uri')}", fg="cyan"))
    click.echo(json.dumps(document, indent=2))
    if output_file:
        with open(output_file, "w") as f:
            json.dump(document, f, indent=2)
        click.echo(click.style(f"DID Document saved to {output_file}", fg="green"))


@did.command("resolve")
@click.argument("did_id")
def resolve(did_id: str):
    """Resolves a stored DID and prints its document."""
    container = build_container(settings)
    try:
        document = container.did_resolver.resolve(did_id)
    except DidAnchorError as e:
        _fail(f"Error ({e.kind}): {e}")
    finally:
        container.close()
    click.echo(json.dumps(document, indent=2))
