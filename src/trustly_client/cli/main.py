"""
Trustly CLI — `trustly` command.

Commands:
  trustly deposit ...                  Start a deposit
  trustly refund <order> <amount> <cur> Refund a deposit
  trustly notification verify <file>   Verify a notification and print the acknowledgement
  trustly keys check                   Load the configured key pair
"""

import logging
from typing import Optional

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
    from rich.markup import escape
except ImportError:
    raise SystemExit("CLI requires extras: pip install trustly-client[cli]")

from trustly_client.client import TrustlyClient
from trustly_client.config import Settings, load_settings
from trustly_client.errors import TrustlyError

console = Console()


def _settings() -> Settings:
    ctx = click.get_current_context()
    return ctx.find_root().obj["settings"]


def _get_client() -> TrustlyClient:
    settings = _settings()
    if not settings.username or not settings.password:
        console.print("[red]No API credentials configured. Set them in ~/.trustly/config.json "
                      "or TRUSTLY_USERNAME / TRUSTLY_PASSWORD.[/red]")
        raise SystemExit(1)
    return TrustlyClient.from_settings(settings)


def _fail(error: TrustlyError) -> None:
    console.print(f"[red]{type(error).__name__} ({error.code}): {escape(str(error))}[/red]")
    raise SystemExit(1)


@click.group()
@click.version_option("0.1.0")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False),
              help="Settings file (default ~/.trustly/config.json)")
@click.option("-v", "--verbose", is_flag=True, help="Log protocol traffic")
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], verbose: bool):
    """Trustly CLI — signed calls to the Trustly API."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler(console=console)])
    try:
        settings = load_settings(config_path)
    except TrustlyError as e:
        _fail(e)
    ctx.obj = {"settings": settings}


# Register subcommands from separate modules
from trustly_client.cli.keys import keys
from trustly_client.cli.methods import deposit, refund
from trustly_client.cli.notification import notification

main.add_command(deposit)
main.add_command(refund)
main.add_command(notification)
main.add_command(keys)


if __name__ == "__main__":
    main()
