"""CLI: trustly deposit|refund"""

import json
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from trustly_client.errors import TrustlyError
from trustly_client.models.envelope import Response
from trustly_client.models.methods import Deposit, MethodBuilder, Refund

console = Console()


def _get_client():
    from trustly_client.cli.main import _get_client
    return _get_client()


def _fail(error):
    from trustly_client.cli.main import _fail
    _fail(error)


def _commit(builder: MethodBuilder, json_output: bool) -> None:
    client = _get_client()
    try:
        with console.status(f"Calling {builder.method}..."):
            response = client.commit(builder)
    except TrustlyError as e:
        _fail(e)
    finally:
        client.close()
    _show(response, json_output)


def _show(response: Response, json_output: bool) -> None:
    if json_output:
        click.echo(json.dumps(response.get_result(), indent=2))
        return
    if response.is_error:
        console.print(f"[red]Error {response.error_code}: {response.error_message}[/red]")
        raise SystemExit(1)
    table = Table(title=f"{response.method} {response.uuid}")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    for name, value in sorted((response.get_data() or {}).items()):
        table.add_row(name, str(value))
    console.print(table)


@click.command("deposit")
@click.option("--notification-url", required=True)
@click.option("--end-user-id", required=True)
@click.option("--message-id", required=True)
@click.option("--currency", required=True)
@click.option("--firstname", required=True)
@click.option("--lastname", required=True)
@click.option("--email", required=True)
@click.option("--locale", required=True)
@click.option("--country", required=True)
@click.option("--success-url", required=True)
@click.option("--fail-url", required=True)
@click.option("--amount", default=None)
@click.option("--ip", default=None)
@click.option("--hold-notifications", default=None, type=int)
@click.option("--json-output", "--json", is_flag=True)
def deposit(json_output: bool, **fields: Optional[str]):
    """Start a deposit and print the redirect URL."""
    try:
        builder = Deposit(**fields)
    except ValidationError as e:
        raise click.BadParameter(str(e))
    _commit(builder, json_output)


@click.command("refund")
@click.argument("order_id")
@click.argument("amount")
@click.argument("currency")
@click.option("--json-output", "--json", is_flag=True)
def refund(order_id: str, amount: str, currency: str, json_output: bool):
    """Refund AMOUNT in CURRENCY of order ORDER_ID."""
    _commit(Refund(order_id=order_id, amount=amount, currency=currency), json_output)
