#!/usr/bin/env python3
"""
Main CLI entry point for genstudio.
"""

import asyncio
import mimetypes
import sys
from pathlib import Path

import click

from genstudio import __version__
from genstudio.artifacts import UploadedFile
from genstudio.backends.gemini import GeminiBackend
from genstudio.config import settings
from genstudio.logging import configure_logging, get_logger
from genstudio.progress.models import GenerationStatus
from genstudio.session import ChatSession, GenerationMode
from genstudio.timeline.models import Message, MessageKind

logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="genstudio")
def cli() -> None:
    """genstudio CLI - generate text, image descriptions and videos."""
    pass


@cli.command()
@click.option(
    "--mode",
    default=GenerationMode.TEXT_TO_VIDEO.value,
    type=click.Choice([mode.value for mode in GenerationMode]),
    help="What to generate (default: text_to_video)",
)
@click.option("--prompt", default="", help="Prompt text")
@click.option(
    "--file",
    "file_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Image to upload for image_to_video / image_to_text",
)
@click.option(
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("video.mp4"),
    help="Where to save a generated video (default: video.mp4)",
)
@click.option(
    "--poll-interval",
    type=float,
    default=None,
    help="Seconds between status checks (default: from settings)",
)
@click.option(
    "--log-level",
    default="warning",
    type=click.Choice(["debug", "info", "warning", "error"]),
    help="Log level (default: warning)",
)
def generate(
    mode: str,
    prompt: str,
    file_path: Path | None,
    output: Path,
    poll_interval: float | None,
    log_level: str,
) -> None:
    """Run one prompt and print or save the result."""
    configure_logging(debug=(log_level == "debug"), log_level=log_level)

    upload = None
    if file_path is not None:
        mime_type, _ = mimetypes.guess_type(file_path.name)
        upload = UploadedFile(
            name=file_path.name,
            data=file_path.read_bytes(),
            mime_type=mime_type or "application/octet-stream",
        )

    try:
        backend = GeminiBackend(settings)
    except ValueError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    session = ChatSession(backend, settings=settings, poll_interval=poll_interval)
    message = asyncio.run(_run(session, prompt, GenerationMode(mode), upload))

    if message.kind is MessageKind.ERROR:
        click.echo(f"✗ {message.content}", err=True)
        sys.exit(1)

    if message.kind is MessageKind.VIDEO:
        path = asyncio.run(session.blob_store.save(message.content, output))
        click.echo(f"✓ Video saved: {path}")
    else:
        click.echo(message.content)


async def _run(
    session: ChatSession,
    prompt: str,
    mode: GenerationMode,
    upload: UploadedFile | None,
) -> Message:
    def echo_status(status: GenerationStatus) -> None:
        if status.progress is not None:
            click.echo(f"[{status.progress:3d}%] {status.message}", err=True)
        else:
            click.echo(status.message, err=True)

    return await session.handle_prompt(prompt, mode, file=upload, on_status=echo_status)


@cli.command()
def models() -> None:
    """Show the configured models."""
    click.echo(f"text:  {settings.text_model}")
    click.echo(f"video: {settings.video_model}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
