import click
import uvicorn

from didanchor.config import settings


@click.command("serve")
@click.option("--host", default=settings.host, show_default=True,
              help="Host to bind the server to.")
@click.option("--port", default=settings.port, show_default=True,
              help="Port to bind the server to.")
@click.option("--reload/--no-reload", default=settings.reload, show_default=True,
              help="Enable auto-reload (for development).")
def serve(host, port, reload):
    """Starts the didanchor identity and credential server."""
    click.echo(f"Starting server on http://{host}:{port}")
    app_string = "didanchor.server:app_factory"

    uvicorn.run(
        app_string,
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_config=None,
        use_colors=False,
    )
