"""framelog CLI — log streams to HDF5 from JSON files.

Commands:
    framelog record <output> -m streams.json -f frames.jsonl

The manifest is a JSON list of stream declarations:

    [{"path": "/robot/pos", "dtype": "float64", "shape": [3], "frames": 100},
     {"path": "/robot/reward", "frames": 100}]

The frames file holds one JSON object per line:

    {"stream": "pos", "frame": [0.1, 0.2, 0.3]}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from framelog.errors import FrameLogError
from framelog.session import Log
from framelog.utils.schema import StreamDeclaration

console = Console()

_manifest_adapter = TypeAdapter(list[StreamDeclaration])


@click.group()
@click.version_option(version="0.1.0", prog_name="framelog")
def cli() -> None:
    """framelog — fixed-capacity stream logging to HDF5."""
    pass


def _load_manifest(path: Path) -> list[StreamDeclaration]:
    try:
        return _manifest_adapter.validate_json(path.read_text())
    except ValidationError as e:
        console.print(f"[red]Invalid manifest {path}:[/red]\n{escape(str(e))}")
        raise SystemExit(1)


def _append_frames(log: Log, path: Path) -> int:
    count = 0
    with path.open() as fh:
        for lineno, line in enumerate(fh, 1):
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
                stream, frame = entry["stream"], entry["frame"]
            except (json.JSONDecodeError, KeyError, TypeError) as e:
                console.print(
                    f"[red]{path.name}:{lineno}: expected an object with 'stream' and "
                    f"'frame' keys ({escape(str(e))})[/red]"
                )
                raise SystemExit(1)
            try:
                log.append(stream, frame)
            except FrameLogError as e:
                console.print(f"[red]{path.name}:{lineno}: {escape(str(e))}[/red]")
                raise SystemExit(1)
            count += 1
    return count


@cli.command()
@click.argument("output", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--manifest", "-m", required=True, type=click.Path(exists=True, path_type=Path),
              help="JSON list of stream declarations")
@click.option("--frames", "-f", type=click.Path(exists=True, path_type=Path),
              help="JSON-lines file of frames to append")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log group and stream activity")
def record(output: Path, manifest: Path, frames: Path | None, verbose: bool) -> None:
    """Create OUTPUT, register the manifest's streams and append frames."""
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )

    declarations = _load_manifest(manifest)

    try:
        log = Log(output)
    except FrameLogError as e:
        console.print(f"[red]Error opening {output}: {escape(str(e))}[/red]")
        raise SystemExit(1)

    with log:
        try:
            for decl in declarations:
                log.register(decl.path, decl.sample(), decl.frames)
        except FrameLogError as e:
            console.print(f"[red]Error registering streams: {escape(str(e))}[/red]")
            raise SystemExit(1)

        appended = _append_frames(log, frames) if frames is not None else 0

        table = Table(title=f"{log.path}")
        table.add_column("Stream")
        table.add_column("Path")
        table.add_column("Shape")
        table.add_column("Dtype")
        table.add_column("Frames", justify="right")
        for handle in log.streams.values():
            table.add_row(
                handle.name,
                handle.path,
                str(handle.frame_shape),
                str(handle.dtype),
                f"{handle.cursor}/{handle.capacity}",
            )

    console.print()
    console.print(table)
    console.print(f"[green]Appended {appended} frame(s) to {len(declarations)} stream(s)[/green]")


if __name__ == "__main__":
    cli()
