"""CLI commands using Typer."""

import typer

from monsterverify.cli.email import app as email_app

app = typer.Typer(name="monsterverify", help="Monster Future AI verification backend CLI")

# Register sub-apps
app.add_typer(email_app, name="email")


@app.callback()
def configure():
    """Monster Future AI verification backend CLI."""
    from monsterverify.logging import setup_logging

    setup_logging()


@app.command()
def version():
    """Show version information."""
    from monsterverify import __version__

    typer.echo(f"monsterverify v{__version__}")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Host to bind to"),
    port: int = typer.Option(8000, help="Port to bind to"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
):
    """Run the API server."""
    import uvicorn

    from monsterverify.logging import get_uvicorn_log_config

    uvicorn.run(
        "monsterverify.main:app",
        host=host,
        port=port,
        reload=reload,
        log_config=get_uvicorn_log_config(),
    )


def main() -> None:
    app()
