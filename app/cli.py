from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from adapters.filesystem.geojson_repository import FileSystemGeoJsonRepository
from adapters.filesystem.svg_repository import FileSystemSvgRepository
from app.config import PaddingSettings, RenderSettings, load_settings
from domain.services.convert_geojson_to_svg import GeoJsonDrawing

app = typer.Typer(no_args_is_help=True)
console = Console()
logger = logging.getLogger(__name__)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


def _parse_attributes(values: list[str]) -> dict[str, str]:
    attributes: dict[str, str] = {}
    for value in values:
        key, sep, item = value.partition("=")
        if not sep or not key.strip():
            msg = f"Attribute must look like key=value, got {value!r}"
            raise typer.BadParameter(msg)
        attributes[key.strip()] = item
    return attributes


def _render_settings(
    config: Path | None,
    width: float | None = None,
    height: float | None = None,
    padding: float | None = None,
    projection: str | None = None,
    use_properties: list[str] | None = None,
    attributes: list[str] | None = None,
) -> RenderSettings:
    settings = load_settings(config).render
    overrides: dict[str, object] = {}
    if width is not None:
        overrides["width"] = width
    if height is not None:
        overrides["height"] = height
    if padding is not None:
        overrides["padding"] = PaddingSettings(
            top=padding, right=padding, bottom=padding, left=padding
        )
    if projection is not None:
        overrides["projection"] = projection
    if use_properties:
        overrides["use_properties"] = list(use_properties)
    if attributes:
        overrides["attributes"] = {**settings.attributes, **_parse_attributes(attributes)}
    # Re-validate so CLI overrides go through the same checks as config files.
    try:
        return RenderSettings.model_validate({**settings.model_dump(), **overrides})
    except ValidationError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _draw(drawing: GeoJsonDrawing, settings: RenderSettings) -> str:
    return drawing.draw_with_projection(
        settings.width,
        settings.height,
        settings.get_projection(),
        settings.to_draw_options(),
    )


@app.command("render")
def render(
    input_path: Path = typer.Argument(..., help="GeoJSON file to render."),
    output_path: Optional[Path] = typer.Option(
        None, "--output", "-o", help="SVG file to write. Prints to stdout when omitted.",
    ),
    width: Optional[float] = typer.Option(None, help="Canvas width."),
    height: Optional[float] = typer.Option(None, help="Canvas height."),
    padding: Optional[float] = typer.Option(None, help="Padding applied to every side."),
    projection: Optional[str] = typer.Option(None, help="Projection name (identity, mercator)."),
    use_property: Optional[list[str]] = typer.Option(
        None, "--use-property", help="Feature property copied to SVG elements. Repeatable.",
    ),
    attribute: Optional[list[str]] = typer.Option(
        None, "--attribute", help="Root <svg> attribute as key=value. Repeatable.",
    ),
    config: Optional[Path] = typer.Option(None, help="YAML render configuration."),
) -> None:
    settings = _render_settings(
        config, width, height, padding, projection, use_property, attribute
    )
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    logger.debug("Rendering %s with %s", input_path, settings)
    repository = FileSystemGeoJsonRepository()
    drawing = GeoJsonDrawing()
    try:
        drawing.append(repository.load_by_path(input_path))
    except ValueError as exc:
        console.print(f"[red]Invalid GeoJSON:[/] {input_path}: {exc}")
        raise typer.Exit(code=1) from exc

    svg = _draw(drawing, settings)
    if output_path is None:
        typer.echo(svg)
        return
    FileSystemSvgRepository().save(svg, output_path)
    console.print(f"[green]Wrote[/] {output_path}")


@app.command("convert")
def convert(
    input_dir: Optional[Path] = typer.Option(
        None, help="Directory with GeoJSON files. Defaults to render.input_dir.",
    ),
    output_dir: Optional[Path] = typer.Option(
        None, help="Directory to write SVG files. Defaults to render.output_dir.",
    ),
    config: Optional[Path] = typer.Option(None, help="YAML render configuration."),
) -> None:
    settings = _render_settings(config)
    source_dir = input_dir or settings.input_dir
    target_dir = output_dir or settings.output_dir
    geojson_repo = FileSystemGeoJsonRepository()
    svg_repo = FileSystemSvgRepository()

    pairs = geojson_repo.load_all_with_paths(source_dir)
    if not pairs:
        console.print(f"[yellow]No GeoJSON files found in {source_dir}[/]")
        raise typer.Exit(code=0)

    target_dir.mkdir(parents=True, exist_ok=True)
    for path, item in pairs:
        drawing = GeoJsonDrawing()
        drawing.append(item)
        target_path = target_dir / f"{path.stem}.svg"
        svg_repo.save(_draw(drawing, settings), target_path)
        console.print(f"[green]Wrote[/] {target_path}")


@app.command("validate")
def validate(input_path: Path = typer.Argument(..., help="GeoJSON file to validate.")) -> None:
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    try:
        item = FileSystemGeoJsonRepository().load_by_path(input_path)
    except ValueError as exc:
        console.print(f"[red]Validation failed:[/] {exc}")
        raise typer.Exit(code=1) from exc
    console.print(f"[green]Valid {item.type}:[/] {input_path}")


@app.command("height-for-width")
def height_for_width(
    input_path: Path = typer.Argument(..., help="GeoJSON file to measure."),
    width: float = typer.Option(..., help="Desired canvas width."),
    projection: Optional[str] = typer.Option(None, help="Projection name (identity, mercator)."),
    config: Optional[Path] = typer.Option(None, help="YAML render configuration."),
) -> None:
    settings = _render_settings(config, projection=projection)
    if not input_path.exists():
        console.print(f"[red]File not found:[/] {input_path}")
        raise typer.Exit(code=1)

    drawing = GeoJsonDrawing()
    try:
        drawing.append(FileSystemGeoJsonRepository().load_by_path(input_path))
    except ValueError as exc:
        console.print(f"[red]Invalid GeoJSON:[/] {input_path}: {exc}")
        raise typer.Exit(code=1) from exc
    if not drawing.points():
        console.print(f"[red]No coordinates in[/] {input_path}")
        raise typer.Exit(code=1)
    try:
        result = drawing.height_for_width(width, settings.get_projection())
    except ValueError as exc:
        console.print(f"[red]Cannot compute height:[/] {exc}")
        raise typer.Exit(code=1) from exc
    typer.echo(f"{result:g}")


if __name__ == "__main__":
    app()
