import json
from typing import Optional

import click

from didanchor.keys import DEFAULT_KEY_TYPE, KeyMaterialGenerator
from didanchor.models import VerificationKeyType


@click.group("keys")
def keys():
    """Create key pairs for DID verification methods"""
    pass


@keys.command("create")
@click.option(
    "--type",
    "key_type",
    type=click.Choice([t.value for t in VerificationKeyType]),
    default=DEFAULT_KEY_TYPE.value,
    show_default=True,
    help="Verification method type of the key pair.",
)
@click.option(
    "-o",
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, writable=True),
    help="Output file for the key pair, private key included (JSON).",
)
def create_key(key_type: str, output_file: Optional[str]):
    """Generates a key pair and prints its multibase public key."""
    key_material = KeyMaterialGenerator().generate(key_type)
    public_info = {
        "verificationMethodType": key_material.verification_method_type,
        "publicKeyMultibase": key_material.public_key_multibase,
    }
    click.echo(click.style(f"Generated {key_material.verification_method_type} key", fg="cyan"))
    click.echo(json.dumps(public_info, indent=2))

    if output_file:
        with open(output_file, "w") as f:
            json.dump({**public_info, **key_material.private_key_material}, f, indent=2)
        click.echo(click.style(f"Key pair saved to {output_file}", fg="green"))
    else:
        click.echo(
            click.style("Private key not written. Use --output to keep it.", fg="yellow")
        )
