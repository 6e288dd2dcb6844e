import click

from didanchor.commands.did import did
from didanchor.commands.keys import keys
from didanchor.commands.serve import serve


@click.group()
def cli():
    """didanchor - Issue, anchor and resolve DIDs, schemas and credentials"""
    pass


cli.add_command(did)
cli.add_command(keys)
cli.add_command(serve)


if __name__ == "__main__":
    cli()
