import base64
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from file_transcoder.errors import TranscodeError
from file_transcoder.file_handler import stage_upload
from file_transcoder.formats import FileFormat
from file_transcoder.logging_setup import configure_logging, get_logger
from file_transcoder.pipeline import Transcoder
from file_transcoder.settings import Settings, config_path

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(help="Convert files between JSON, XML, CSV and delimited text.")

SECRET_KEY_ENV = "FILE_TRANSCODER_SECRET_KEY"


@app.callback()
def main(
    ctx: typer.Context,
    env: str = typer.Option(None, "--env", help="Config environment (dev, prod)"),
):
    load_dotenv(override=False)
    ctx.ensure_object(dict)
    cfg_path = config_path(env)
    settings = Settings.load(str(cfg_path))
    ctx.obj["SETTINGS"] = settings

    configure_logging(
        level=settings.logging.level,
        format_type=settings.logging.format,
        structured=settings.logging.structured,
    )


@app.command()
def health(ctx: typer.Context):
    settings: Settings = ctx.obj["SETTINGS"]
    console.print({"ok": True, "log_level": settings.logging.level})


@app.command()
def formats(ctx: typer.Context):
    """List supported formats and their default delimiters."""
    cfg = ctx.obj["SETTINGS"].transcode
    table = Table("format", "family", "default delimiter")
    for fmt in FileFormat:
        family = "structured" if fmt.is_structured else "tabular"
        delimiter = repr(cfg.default_delimiter(fmt)) if fmt.is_tabular else "-"
        table.add_row(fmt.value, family, delimiter)
    console.print(table)


@app.command()
def convert(
    ctx: typer.Context,
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File to convert"),
    to: str = typer.Option(..., "--to", "-t", help="Target format: json, xml, csv or txt"),
    key: str = typer.Option(
        None, "--key", "-k", envvar=SECRET_KEY_ENV, help="Secret key used to sign card values"
    ),
    delimiter: str = typer.Option(None, "--delimiter", "-d", help="Delimiter for csv/txt"),
    output: Path = typer.Option(None, "--output", "-o", help="Write decoded output here"),
    decode: bool = typer.Option(
        False, "--decode/--base64", help="Print decoded text instead of base64"
    ),
):
    """Convert INPUT_PATH to another format.

    The input file is copied first; the pipeline consumes the copy.
    """
    log = get_logger("cli.convert")
    settings: Settings = ctx.obj["SETTINGS"]
    secret = key or os.environ.get(SECRET_KEY_ENV, "")

    staged = stage_upload(input_path)
    log.info("Input staged", source=str(input_path), staged=str(staged))
    try:
        encoded = Transcoder(settings).transcode(staged, secret, to, delimiter)
    except TranscodeError as e:
        err_console.print(f"[bold red]{e.kind.value}[/]: {e.message}")
        raise typer.Exit(code=2 if e.is_client_error else 1)
    finally:
        _remove_staging_dir(staged)

    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_bytes(base64.b64decode(encoded))
        log.info("Output written", path=str(output))
        console.print(str(output))
    elif decode:
        console.print(
            base64.b64decode(encoded).decode("utf-8"), markup=False, highlight=False, soft_wrap=True
        )
    else:
        console.print(encoded, markup=False, highlight=False, soft_wrap=True)


def _remove_staging_dir(staged: Path) -> None:
    try:
        staged.parent.rmdir()
    except OSError:
        get_logger("cli.convert").warning("Staging dir not removed", path=str(staged.parent))


if __name__ == "__main__":
    app()
