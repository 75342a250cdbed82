"""CLI: trustly keys check"""

import click
from rich.console import Console

from trustly_client import signing
from trustly_client.errors import TrustlyError

console = Console()


def _settings():
    from trustly_client.cli.main import _settings
    return _settings()


def _fail(error):
    from trustly_client.cli.main import _fail
    _fail(error)


@click.group()
def keys():
    """Key material commands."""


@keys.command("check")
def keys_check():
    """Load the configured private and public keys."""
    settings = _settings()
    try:
        private_key = signing.load_private_key(settings.private_key, settings.key_dir)
        public_key = signing.load_public_key(settings.public_key, settings.key_dir)
    except TrustlyError as e:
        _fail(e)
    console.print(f"[green]Private key OK[/green] ({private_key.key_size} bits) "
                  f"{signing.resolve_key_path(settings.private_key, settings.key_dir)}")
    console.print(f"[green]Public key OK[/green] ({public_key.key_size} bits) "
                  f"{signing.resolve_key_path(settings.public_key, settings.key_dir)}")
