from click.testing import CliRunner

from didanchor.cli import cli


def test_cli_group():
    """Test the main CLI group."""
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "didanchor - Issue, anchor and resolve DIDs, schemas and credentials" in result.output
    assert "did" in result.output
    assert "keys" in result.output
    assert "serve" in result.output


def test_did_group():
    runner = CliRunner()
    result = runner.invoke(cli, ["did", "--help"])
    assert result.exit_code == 0
    assert "generate" in result.output
    assert "resolve" in result.output
