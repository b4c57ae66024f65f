"""Email diagnostics CLI commands."""

import asyncio
import math

import typer
from rich.console import Console
from rich.table import Table

from monsterverify.config import settings
from monsterverify.services.email import (
    EmailDeliveryError,
    EmailNotConfiguredError,
    EmailService,
    get_email_capability,
)

console = Console()
app = typer.Typer(help="Email configuration commands")


def get_email_service() -> EmailService:
    return EmailService(capability=get_email_capability(settings), app_name=settings.app_name)


@app.command("check")
def check():
    """Open and authenticate a connection to the configured mail server."""
    service = get_email_service()

    table = Table(title="Email Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_row("Backend", settings.email_backend)
    table.add_row("Server", f"{settings.smtp_host}:{settings.smtp_port}")
    table.add_row("Account", service.identity or "[red]not set[/red]")
    console.print(table)

    try:
        asyncio.run(service.check_connection())
    except EmailNotConfiguredError as e:
        console.print(f"[red]Not configured:[/red] {e}")
        raise typer.Exit(1) from e
    except EmailDeliveryError as e:
        console.print(f"[red]Connection failed:[/red] {e}")
        raise typer.Exit(1) from e

    console.print("[green]Email configuration is working[/green]")


@app.command("send-code")
def send_code(
    email: str = typer.Argument(..., help="Recipient email address"),
):
    """Send a one-off verification code email.

    The code is not stored; use this to preview delivery and formatting.
    """
    from monsterverify.services.codes import generate_code

    service = get_email_service()
    code = generate_code()
    ttl_minutes = math.ceil(settings.code_ttl_seconds / 60)

    try:
        asyncio.run(service.send_verification_code(email, code, ttl_minutes))
    except EmailNotConfiguredError as e:
        console.print(f"[red]Not configured:[/red] {e}")
        raise typer.Exit(1) from e
    except EmailDeliveryError as e:
        console.print(f"[red]Send failed:[/red] {e}")
        raise typer.Exit(1) from e

    console.print(f"[green]Sent code[/green] {code} [green]to[/green] {email}")
