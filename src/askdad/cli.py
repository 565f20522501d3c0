"""Typer CLI definition for askdad."""

import asyncio
import logging

import typer
import uvicorn
from dotenv import load_dotenv

from .config import CONFIG_PATH, generate_config, load_config
from .errors import AskDadError
from .personas import normalize_mode, resolve_persona
from .speech.shaping import prepare_for_speech

app = typer.Typer(help="Ask Dad backend: answers as text, then as streamed speech")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format=LOG_FORMAT,
    )


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (from config if omitted)"),
    port: int | None = typer.Option(None, "--port", help="Port (from config if omitted)"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Run the HTTP server."""
    load_dotenv()
    configure_logging(debug)

    from .server.app import create_app

    try:
        config = load_config()
        application = create_app(config)
    except ValueError as e:
        typer.echo(f"Error: Invalid configuration: {e}", err=True)
        raise typer.Exit(1) from None

    uvicorn.run(
        application,
        host=host or config.server.host,
        port=port or config.server.port,
        log_level="debug" if debug else "info",
    )


@app.command()
def voices(
    debug: bool = typer.Option(False, "--debug", help="Show verbose error messages"),
) -> None:
    """List ElevenLabs voices available to ELEVENLABS_API_KEY."""
    load_dotenv()
    from .speech.voices import list_voices

    try:
        available = asyncio.run(list_voices())
    except AskDadError as e:
        if debug:
            typer.echo(f"Debug - Failed to list voices: {e!r}", err=True)
        else:
            typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    for voice in available:
        category = f" ({voice.category})" if voice.category else ""
        typer.echo(f"{voice.voice_id}  {voice.name}{category}")


@app.command()
def shape(
    text: str = typer.Argument(..., help="Text to shape for speech"),
    mode: str = typer.Option("default", "-m", "--mode", help="Delivery mode"),
    no_pacing: bool = typer.Option(False, "--no-pacing", help="Skip '...' pauses"),
    max_chars: int = typer.Option(1600, "--max-chars", help="Maximum characters"),
) -> None:
    """Print text as it would be sent for synthesis, with its voice profile."""
    persona = resolve_persona(mode)
    try:
        shaped = prepare_for_speech(
            text,
            max_chars=max_chars,
            pacing=not no_pacing,
            step_style=persona.step_style,
        )
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    typer.echo(shaped)
    typer.echo(f"mode={normalize_mode(mode)} voice={persona.voice.to_payload()}", err=True)


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write the default config file."""
    if CONFIG_PATH.exists() and not force:
        typer.echo(f"Config already exists at {CONFIG_PATH} (use --force to overwrite)")
        raise typer.Exit(1)
    path = generate_config(CONFIG_PATH)
    typer.echo(f"Wrote {path}")
