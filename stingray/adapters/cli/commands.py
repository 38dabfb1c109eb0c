"""
Commandes CLI de lecture: connexion, episode a suivre, URL de flux.
"""

import asyncio
import uuid
from typing import Annotated, Optional

import typer
from rich.table import Table

from stingray.adapters.cli.helpers import (
    console,
    resolve_credentials,
    suppress_loguru,
    with_container,
)
from stingray.core.entities import Movie
from stingray.core.ports import AuthenticationError, MediaServerError, UserProfile
from stingray.core.value_objects import LimitedBitrate
from stingray.services import default_track, resolve_next_up
from stingray.utils import format_ticks


def login(
    url: Annotated[str, typer.Argument(help="Adresse du serveur (ex: http://jellyfin.local:8096)")],
    username: Annotated[str, typer.Argument(help="Nom d'utilisateur")],
    password: Annotated[
        str,
        typer.Option("--password", "-p", prompt=True, hide_input=True, help="Mot de passe"),
    ],
) -> None:
    """Se connecte au serveur et enregistre l'utilisateur comme prefere."""
    asyncio.run(_login_async(url.rstrip("/"), username, password))


@with_container()
async def _login_async(container, url: str, username: str, password: str) -> None:
    """Implementation async de la commande login."""
    client = container.media_server(server_url=url)
    try:
        with suppress_loguru():
            result = await client.authenticate(username, password)
    except AuthenticationError:
        console.print(f"[red]Identifiants refuses pour {username}.[/red]")
        raise typer.Exit(code=1)
    except MediaServerError as e:
        console.print(f"[red]Connexion impossible: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        await client.close()

    store = container.user_profiles()
    store.add_user(
        UserProfile(
            id=result.user_id,
            display_name=result.user_name,
            server_url=url,
            access_token=result.access_token,
            session_id=result.session_id,
            server_id=result.server_id,
        )
    )
    store.set_preferred_user(result.user_id)
    console.print(f"[green]Connecte en tant que {result.user_name}[/green] sur {url}")


def next_up(
    series_id: Annotated[str, typer.Argument(help="ID de la serie sur le serveur")],
) -> None:
    """Affiche l'episode a regarder ensuite pour une serie."""
    asyncio.run(_next_up_async(series_id))


@with_container()
async def _next_up_async(container, series_id: str) -> None:
    """Implementation async de la commande next-up."""
    credentials = resolve_credentials(container)
    if credentials is None:
        console.print("[red]Aucun utilisateur connecte.[/red] Utilisez 'stingray login'.")
        raise typer.Exit(code=1)

    client = container.media_server(server_url=credentials.server_url)
    try:
        with suppress_loguru():
            seasons = await client.get_seasons(series_id, credentials.access_token)
    except MediaServerError as e:
        console.print(f"[red]Saisons indisponibles: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        await client.close()

    episode = resolve_next_up(seasons)
    if episode is None:
        console.print("[yellow]Aucun episode pour cette serie.[/yellow]")
        return

    season = next(s for s in seasons if any(e is episode for e in s.episodes))
    table = Table(title="Prochain episode", show_header=False)
    table.add_column("Champ", style="cyan")
    table.add_column("Valeur")
    table.add_row("Saison", season.title)
    table.add_row("Episode", f"{episode.episode_number}. {episode.title}")
    resume_ticks = episode.media_sources[0].resume_ticks if episode.media_sources else 0
    if resume_ticks > 0:
        table.add_row("Reprise", f"Continue from {format_ticks(resume_ticks)}")
    else:
        table.add_row("Reprise", "Depuis le debut")
    console.print(table)


def stream_url(
    item_id: Annotated[str, typer.Argument(help="ID du film sur le serveur")],
    bitrate: Annotated[
        Optional[int],
        typer.Option("--bitrate", "-b", help="Plafond de debit en bits/s"),
    ] = None,
) -> None:
    """Affiche l'URL de flux HLS d'un film (pistes par defaut)."""
    asyncio.run(_stream_url_async(item_id, bitrate))


@with_container()
async def _stream_url_async(container, item_id: str, bitrate: Optional[int]) -> None:
    """Implementation async de la commande stream-url."""
    credentials = resolve_credentials(container)
    if credentials is None:
        console.print("[red]Aucun utilisateur connecte.[/red] Utilisez 'stingray login'.")
        raise typer.Exit(code=1)

    client = container.media_server(server_url=credentials.server_url)
    try:
        with suppress_loguru():
            item = await client.get_item(item_id, credentials.user_id, credentials.access_token)
    except MediaServerError as e:
        console.print(f"[red]Element indisponible: {e}[/red]")
        raise typer.Exit(code=1)
    finally:
        await client.close()

    if not isinstance(item, Movie) or not item.media_sources:
        console.print(f"[red]{item_id} n'est pas un film lisible.[/red]")
        raise typer.Exit(code=1)

    source = item.media_sources[0]
    preferences = container.user_profiles().get_preferred_user()
    video = default_track(source.video_tracks)
    audio = default_track(source.audio_tracks)
    subtitle = default_track(source.subtitle_tracks) if preferences.uses_subtitles else None
    if video is None or audio is None:
        console.print(f"[red]Aucune piste video/audio pour {source.id}.[/red]")
        raise typer.Exit(code=1)

    requested = LimitedBitrate(bitrate) if bitrate is not None else preferences.bitrate
    bitrate_bits = requested.cap_bits or video.bitrate

    handle = client.build_playback_request(
        access_token=credentials.access_token,
        media_id=source.id,
        video_track_id=video.id,
        audio_track_id=audio.id,
        subtitle_track_id=subtitle.id if subtitle else None,
        bitrate_bits=bitrate_bits,
        playback_session_id=str(uuid.uuid4()),
    )
    if handle is None:
        console.print("[red]Impossible de construire le flux.[/red]")
        raise typer.Exit(code=1)

    console.print(f"[bold]{item.title}[/bold] ({source.name or source.id})")
    console.print(handle.url, soft_wrap=True)
