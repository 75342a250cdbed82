"""CLI: trustly notification verify"""

import click
from rich.console import Console
from rich.table import Table

from trustly_client.errors import SignatureError, TrustlyError
from trustly_client.notifications import Notification
from trustly_client.storage import SQLiteNotificationStore

console = Console(stderr=True)


def _settings():
    from trustly_client.cli.main import _settings
    return _settings()


def _fail(error):
    from trustly_client.cli.main import _fail
    _fail(error)


@click.group()
def notification():
    """Inbound notification tools."""


@notification.command("verify")
@click.argument("body_file", type=click.File("rb"))
@click.option("--save", is_flag=True, help="Store the notification if it is new")
@click.option("--failed", is_flag=True, help="Acknowledge with FAILED instead of OK")
def notification_verify(body_file, save: bool, failed: bool):
    """Verify a notification body (file or -) and print the signed acknowledgement."""
    body = body_file.read()
    settings = _settings()
    try:
        store = SQLiteNotificationStore(settings.database)
    except TrustlyError as e:
        _fail(e)
    try:
        _verify(body, settings, store, save, failed)
    finally:
        store.close()


def _verify(body, settings, store, save: bool, failed: bool):
    try:
        notif = Notification.from_settings(body, settings, store)
    except SignatureError as e:
        console.print("[red]Signature is NOT valid. The notification content is untrusted.[/red]")
        _fail(e)
    except TrustlyError as e:
        _fail(e)

    request = notif.request
    duplicate = notif.is_duplicate()
    table = Table(title="Notification")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("method", str(request.method))
    table.add_row("uuid", str(request.uuid))
    table.add_row("notification id", str(notif.notification_id))
    table.add_row("signature", "[green]valid[/green]")
    table.add_row("duplicate", "[yellow]yes[/yellow]" if duplicate else "no")
    table.add_row("audit recorded", "yes" if notif.audit_recorded else "[yellow]no[/yellow]")
    console.print(table)

    try:
        if save and not duplicate:
            stored = notif.save()
            console.print("[green]Saved.[/green]" if stored else "[yellow]Already stored.[/yellow]")
        ack = notif.build_acknowledgement(not failed)
    except TrustlyError as e:
        _fail(e)
    click.echo(ack.to_json())
