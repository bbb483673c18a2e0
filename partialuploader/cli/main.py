"""partialupload CLI - Main commands."""
import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TaskProgressColumn

from ..core.config import DEFAULT_CHUNK_SIZE, PacingConfig, ReceiverConfig, SenderConfig

app = typer.Typer(
    name="partialupload",
    help="Chunked file transfer over HTTP",
    add_completion=False
)
console = Console()


def run_async(coro):
    """Run async function."""
    return asyncio.run(coro)


def parse_headers(values: Optional[List[str]]) -> Dict[str, str]:
    """Turn 'Name: value' strings into a header dict."""
    headers = {}
    for value in values or []:
        name, sep, content = value.partition(':')
        if not sep or not name.strip():
            raise typer.BadParameter(f"Header must look like 'Name: value', got {value!r}")
        headers[name.strip()] = content.strip()
    return headers


@app.command()
def send(
    file_path: Path = typer.Argument(..., help="Local file to send"),
    url: str = typer.Argument(..., help="Receiver endpoint, e.g. http://host:8080/upload"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", "-c", min=1, help="Chunk size in bytes"),
    header: List[str] = typer.Option(None, "--header", "-H", help="Extra request header 'Name: value'"),
    session_id: str = typer.Option(None, "--session-id", help="Use this session id instead of a fresh one"),
    no_pacing: bool = typer.Option(False, "--no-pacing", help="Disable startup and inter-chunk delays"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Send a file to a receiver in sequential chunks."""
    from partialuploader import setup_logging
    from partialuploader.core.sender import ChunkSender, SendProgress

    setup_logging(logging.DEBUG if verbose else logging.WARNING)
    headers = parse_headers(header)
    config = SenderConfig(
        chunk_size=chunk_size,
        pacing=PacingConfig.disabled() if no_pacing else PacingConfig()
    )

    async def do_send():
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console
        ) as progress:
            task = progress.add_task(f"Sending {file_path.name}", total=100)

            def on_progress(p: SendProgress):
                progress.update(task, completed=p.percentage)

            async with ChunkSender(config, progress_callback=on_progress) as sender:
                return await sender.send(url, file_path, headers=headers, session_id=session_id)

    result = run_async(do_send())
    if not result.success:
        label = "Transfer aborted" if result.fatal else "Send failed"
        console.print(f"[red]{label}: {result.message}[/red]")
        if result.id:
            console.print(f"Session: {result.id} ({result.chunks_sent} chunks sent)")
        raise typer.Exit(1)

    console.print(f"[green]Uploaded:[/green] {file_path.name}")
    console.print(f"Session: {result.id}")
    console.print(f"Chunks: {result.chunks_sent}")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8080, "--port", "-p", help="Port to bind"),
    base_path: Path = typer.Option(Path("App_Data"), "--base-path", "-b", help="Root directory for chunks and files"),
    final_area: str = typer.Option("tmp", "--final-area", help="Folder for assembled files"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", "-c", min=1, help="Largest accepted chunk"),
    route: str = typer.Option("/upload", "--route", help="Route chunks are posted to"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Receive chunks and assemble uploaded files."""
    from partialuploader import setup_logging
    from partialuploader.server import run_server

    setup_logging(logging.DEBUG if verbose else logging.INFO)
    try:
        config = ReceiverConfig(
            base_path=str(base_path),
            final_area_name=final_area,
            max_chunk_size=chunk_size,
            route=route
        )
    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[cyan]Receiving on http://{host}:{port}{config.route}[/cyan]")
    run_server(config, host=host, port=port)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
