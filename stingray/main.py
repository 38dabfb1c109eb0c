"""
Point d'entrée CLI de Stingray.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import typer
from loguru import logger

from .adapters.cli.commands import login, next_up, stream_url
from .config import Settings
from .container import Container
from .logging_config import configure_logging

__version__ = "0.1.0"

app = typer.Typer(
    name="stingray",
    help="Coeur de lecture pour serveur media compatible Jellyfin",
)
container = Container()

app.command()(login)
app.command(name="next-up")(next_up)
app.command(name="stream-url")(stream_url)


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    logger.info("Configuration Stingray")
    typer.echo(f"Serveur : {config.server_url}")
    typer.echo(f"Authentifié : {'oui' if config.authenticated else 'non (profil préféré)'}")
    typer.echo(f"Profils : {config.profiles_file}")
    typer.echo(f"Timeout HTTP : {config.http_timeout}s (connexion {config.http_connect_timeout}s)")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Stingray v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    settings = container.config()
    configure_logging(settings)

    logger.info("Démarrage de Stingray", version=__version__)

    app()


if __name__ == "__main__":
    main()
