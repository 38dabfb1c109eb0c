"""Interface ligne de commande (Typer + Rich)."""

from stingray.adapters.cli.commands import login, next_up, stream_url

__all__ = ["login", "next_up", "stream_url"]
