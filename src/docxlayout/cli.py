"""docxlayout - CLI Entry Point."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from docxlayout.config import settings
from docxlayout.docx_parser import load_document
from docxlayout.exceptions import DocxLayoutError
from docxlayout.report import generate_report, layout_to_json, save_layout


@click.command()
@click.argument("input_docx", type=click.Path(path_type=Path))
@click.option("-o", "--output", "output_json", type=click.Path(path_type=Path), help="Write the layout tree as JSON")
@click.option("--include-images", is_flag=True, help="Embed image bytes (base64) in the JSON output")
@click.option("--fields", "show_fields", is_flag=True, help="List editable fields and their text")
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(input_docx: Path, output_json: Optional[Path] = None, include_images: bool = False,
        show_fields: bool = False, verbose: bool = False):
    """Build the layout tree of a Word document.

    INPUT_DOCX: Path to the input .docx file.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level.upper(),
        format=settings.log_format,
    )

    try:
        layout = load_document(input_docx, limits=settings.package_limits())
    except DocxLayoutError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if verbose:
        report = generate_report(layout, input_docx)
        click.echo(f"  Page size: {report.page_width_px:.1f}x{report.page_height_px:.1f} px")
        click.echo(f"  Header: {'yes' if report.has_header else 'no'}, Footer: {'yes' if report.has_footer else 'no'}")
        click.echo(f"  Text blocks: {report.text_blocks}, Images: {report.images}, Tables: {report.tables}")
        click.echo(f"  Placeholders: {report.placeholders}, Warnings: {len(report.warnings)}")

    if show_fields:
        for name, text in layout.fields.items():
            click.echo(f"{name}\t{text}")

    if output_json:
        save_layout(layout, output_json, include_images=include_images)
        if verbose:
            click.echo(f"Written to: {output_json}")
    elif not show_fields:
        click.echo(layout_to_json(layout, include_images=include_images))


if __name__ == "__main__":
    cli()
