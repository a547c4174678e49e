from __future__ import annotations

import dataclasses
from pathlib import Path

import typer

from qrc_ass.config import AssStyle, load_config, parse_margins, save_config_style
from qrc_ass.convert import (
    FILE_ERRORS,
    FORMATS,
    convert_file,
    convert_many,
    detect_format,
    parse_lines,
    read_lines,
    write_extracted_lrc,
)
from qrc_ass.logging_setup import setup_logging


app = typer.Typer(no_args_is_help=True, add_completion=False)


def _echo_warning(msg: str) -> None:
    typer.secho(f"warning: {msg}", fg=typer.colors.YELLOW, err=True)


def _echo_error(msg: str) -> None:
    typer.secho(f"error: {msg}", fg=typer.colors.RED, err=True)


def _margins_option(value: str | None) -> tuple[int, int, int] | None:
    if value is None:
        return None
    try:
        return parse_margins(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


@app.command()
def convert(
    inputs: list[Path] = typer.Argument(..., exists=True, dir_okay=False, help="ASS or QRC files"),
    to: str | None = typer.Option(None, "--to", case_sensitive=False, help="ass|qrc|lys (default: the other format, LYS for ASS with singer names)"),
    out: Path | None = typer.Option(None, "--out", help="Output file (single input only)"),
    style: str | None = typer.Option(None, "--style", help="ASS Style field"),
    layer: int | None = typer.Option(None, "--layer", help="ASS Layer field"),
    margins: str | None = typer.Option(None, "--margins", help="ASS margins as L,R,V"),
    rounding: str | None = typer.Option(None, "--rounding", help="truncate|round for Dialogue start/end"),
    full_header: bool = typer.Option(False, "--full-header", help="Write [Script Info] and [V4+ Styles] too"),
    extract_lrc: bool = typer.Option(False, "--extract-lrc", help="Also write translation/roma LRC files"),
    keep_going: bool = typer.Option(False, "--keep-going", help="Continue with the next file after a failure"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """
    Convert ASS karaoke <-> QRC. Output defaults to <name>_converted.<ext>.
    """
    setup_logging(debug)
    if to is not None and to.lower() not in FORMATS:
        raise typer.BadParameter("--to must be one of: ass, qrc, lys")
    if rounding is not None and rounding not in ("truncate", "round"):
        raise typer.BadParameter("--rounding must be truncate or round")
    if out is not None and len(inputs) > 1:
        raise typer.BadParameter("--out needs exactly one input file")

    cfg = load_config()
    ass_style = cfg.ass_style
    if style is not None:
        ass_style = dataclasses.replace(ass_style, style=style)
    if layer is not None:
        ass_style = dataclasses.replace(ass_style, layer=layer)
    m = _margins_option(margins)
    if m is not None:
        ass_style = dataclasses.replace(ass_style, margin_l=m[0], margin_r=m[1], margin_v=m[2])
    cfg = dataclasses.replace(
        cfg,
        ass_style=ass_style,
        rounding=rounding or cfg.rounding,
        full_header=full_header or cfg.full_header,
    )

    if out is not None:
        try:
            results = [convert_file(inputs[0], target=to, output=out, config=cfg, extract=extract_lrc)]
        except FILE_ERRORS as e:
            _echo_error(f"{inputs[0]}: {e}")
            raise typer.Exit(code=1)
    else:
        results = convert_many(inputs, target=to, config=cfg, extract=extract_lrc, keep_going=keep_going).results

    failed = False
    for r in results:
        if not r.ok:
            failed = True
            _echo_error(f"{r.source}: {r.error}")
            continue
        for w in r.warnings:
            _echo_warning(f"{r.source}: {w}")
        typer.echo(f"{r.source} -> {r.output}")
        for p in r.lrc_outputs:
            typer.echo(f"{r.source} -> {p}")

    if failed:
        raise typer.Exit(code=1)


@app.command()
def inspect(path: Path = typer.Argument(..., exists=True, dir_okay=False)):
    """Parse a file and print stats and timing warnings."""
    try:
        lines = read_lines(path)
        fmt = detect_format(path, lines)
        doc, warnings, stats = parse_lines(lines, fmt)
    except FILE_ERRORS as e:
        _echo_error(str(e))
        raise typer.Exit(code=1)

    typer.echo(f"format={fmt}")
    typer.echo(f"lines_total={stats.lines_total}")
    typer.echo(f"records={stats.records}")
    typer.echo(f"tags={doc.tags}")
    typer.echo(f"lines_ignored={stats.lines_ignored}")
    typer.echo(f"syllables={sum(len(line.syllables) for line in doc.lines)}")
    for w in warnings:
        _echo_warning(str(w))


@app.command("extract-lrc")
def extract_lrc_cmd(path: Path = typer.Argument(..., exists=True, dir_okay=False)):
    """Write <name>.<lang>.lrc / <name>.roma.lrc from trans/ts/roma events."""
    try:
        written = write_extracted_lrc(path, read_lines(path))
    except FILE_ERRORS as e:
        _echo_error(str(e))
        raise typer.Exit(code=1)
    if not written:
        typer.echo("No translation or roma lines found")
        return
    for p in written:
        typer.echo(str(p))


@app.command()
def config(
    style: str | None = typer.Option(None, "--style", help="Default ASS Style field"),
    layer: int | None = typer.Option(None, "--layer", help="Default ASS Layer field"),
    margins: str | None = typer.Option(None, "--margins", help="Default ASS margins as L,R,V"),
):
    """Show or save the default ASS style."""
    cfg = load_config()
    current = cfg.ass_style
    m = _margins_option(margins)
    if style is None and layer is None and m is None:
        typer.echo(f"style={current.style} layer={current.layer} margins={current.margin_l},{current.margin_r},{current.margin_v}")
        return

    updated = AssStyle(
        layer=current.layer if layer is None else layer,
        style=current.style if style is None else style,
        name=current.name,
        margin_l=current.margin_l if m is None else m[0],
        margin_r=current.margin_r if m is None else m[1],
        margin_v=current.margin_v if m is None else m[2],
        effect=current.effect,
    )
    save_config_style(updated)
    typer.echo(f"Saved to {cfg.config_dir / 'config.json'}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
