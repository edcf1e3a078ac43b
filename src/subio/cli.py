"""CLI implementation for subio."""

import io
import json
import sys
from pathlib import Path
from typing import Optional

import typer

from . import open_subreader, open_subwriter

app = typer.Typer(add_completion=False, help="Read and patch byte windows of files and URLs.")

DEFAULT_CHUNK_SIZE = io.DEFAULT_BUFFER_SIZE


def _emit(obj: dict, jsonl: bool) -> None:
    if jsonl:
        typer.echo(json.dumps(obj))
    else:
        typer.echo(json.dumps(obj, indent=2))


def _read_input(input_path: str) -> bytes:
    """Get the payload from a file, or from stdin for '-'."""
    if input_path == "-":
        return sys.stdin.buffer.read()
    return Path(input_path).read_bytes()


@app.command()
def cat(
    source: str = typer.Argument(..., help="File or URL to read from"),
    offset: int = typer.Option(0, "--offset", min=0, help="Absolute offset where the window starts"),
    length: int = typer.Option(..., "--length", min=0, help="Window length in bytes"),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Write to PATH instead of stdout"),
    chunk_size: int = typer.Option(DEFAULT_CHUNK_SIZE, "--chunk-size", min=1, help="Bytes per read"),
):
    """Copy the bytes of one window to stdout or a file."""
    try:
        reader = open_subreader(source, offset, length)
    except (OSError, ValueError) as e:
        typer.echo(f"Cannot open {source}: {e}", err=True)
        raise typer.Exit(code=1)

    sink = None
    try:
        # open output sink
        sink = open(output, "wb") if output else sys.stdout.buffer
        while chunk := reader.read(chunk_size):
            sink.write(chunk)
        sink.flush()
    except OSError as e:
        typer.echo(f"Copy failed: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        reader.detach().close()
        if output and sink is not None:
            sink.close()


@app.command()
def patch(
    target: Path = typer.Argument(..., help="Local file to modify in place"),
    offset: int = typer.Option(0, "--offset", min=0, help="Absolute offset where the window starts"),
    length: int = typer.Option(..., "--length", min=0, help="Window length in bytes"),
    input_path: str = typer.Option("-", "--input", help="Payload file, or '-' for stdin"),
    write_beyond: bool = typer.Option(False, "--write-beyond", help="Let the payload run past the window end"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force single-line JSON output"),
):
    """Write a payload into one window of a local file."""
    try:
        payload = _read_input(input_path)
        writer = open_subwriter(target, offset, length, write_beyond=write_beyond)
    except (OSError, ValueError) as e:
        typer.echo(f"Cannot patch {target}: {e}", err=True)
        raise typer.Exit(code=1)

    inner = writer.inner
    try:
        written = 0
        while written < len(payload):
            n = writer.write(payload[written:])
            if not n:
                break
            written += n
        window = writer.window
        writer.detach()
    except (OSError, ValueError) as e:
        typer.echo(f"Write failed: {e}", err=True)
        raise typer.Exit(code=1)
    finally:
        try:
            if not writer.closed:
                writer.close()
        finally:
            inner.close()

    _emit({
        "written": written,
        "requested": len(payload),
        "truncated": written < len(payload),
        "window": window.asdict(),
    }, jsonl)


@app.command()
def info(
    source: str = typer.Argument(..., help="File or URL to inspect"),
    offset: int = typer.Option(0, "--offset", min=0, help="Absolute offset where the window starts"),
    length: int = typer.Option(..., "--length", min=0, help="Window length in bytes"),
    jsonl: bool = typer.Option(False, "--jsonl", help="Force single-line JSON output"),
):
    """Describe a window and how much of it the source actually holds."""
    try:
        reader = open_subreader(source, offset, length)
        window = reader.window
        inner = reader.detach()
        try:
            size = inner.seek(0, io.SEEK_END)
        finally:
            inner.close()
    except (OSError, ValueError) as e:
        typer.echo(f"Cannot inspect {source}: {e}", err=True)
        raise typer.Exit(code=1)

    payload = window.asdict()
    payload.update({
        "source_size": size,
        "available": max(0, min(window.end, size) - window.start),
    })
    _emit(payload, jsonl)


if __name__ == "__main__":
    app()
