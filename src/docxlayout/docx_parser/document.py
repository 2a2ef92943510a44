"""DOCX Document Loader - main entry point for building a layout tree."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from lxml import etree

from docxlayout.docx_parser.context import BuildContext
from docxlayout.docx_parser.namespaces import NamespaceResolver, localname
from docxlayout.docx_parser.package import Package, PackageLimits, open_package
from docxlayout.docx_parser.relationships import RelationshipResolver
from docxlayout.docx_parser.runs import build_paragraph, has_runs
from docxlayout.docx_parser.tables import build_table
from docxlayout.docx_parser.units import parse_length, twips_to_px
from docxlayout.exceptions import (
    DocumentNotFoundError,
    InvalidPathError,
    MissingDocumentPartError,
    MissingPageSizeError,
    NodeError,
    PackageError,
    PartMissingError,
    WrongFileTypeError,
)
from docxlayout.ir import DocumentLayout, LayoutNode, Placeholder, Section, editable_blocks

logger = logging.getLogger(__name__)

DOCUMENT_PART = "document.xml"
HEADER_PART = "header1.xml"
FOOTER_PART = "footer1.xml"
DOCX_EXTENSION = ".docx"


def load_document(path: Union[str, Path], limits: Optional[PackageLimits] = None) -> DocumentLayout:
    """Load a .docx file and return its layout tree.

    Args:
        path: Path to the .docx file.
        limits: Optional ZIP-bomb limits for the package.

    Returns:
        DocumentLayout: owns all text and image bytes; the package is closed.

    Raises:
        InvalidPathError, DocumentNotFoundError, WrongFileTypeError: bad input.
        NotAPackageError, PackageLimitError: unusable archive.
        MissingDocumentPartError, MalformedPartError: no usable document part.
        MissingPageSizeError: the body has no ``w:sectPr/w:pgSz``.
    """
    docx_path = validate_path(path)
    logger.info(f"Loading {docx_path}")

    with open_package(docx_path, limits) as package:
        relationships = RelationshipResolver(package)
        warnings: List[str] = []

        try:
            root = package.read_xml(DOCUMENT_PART)
        except PartMissingError as exc:
            raise MissingDocumentPartError(
                DOCUMENT_PART, f"Cannot find word/{DOCUMENT_PART} in {docx_path}"
            ) from exc

        # A document without a w namespace has nothing to lay out: let it propagate.
        ctx = BuildContext(
            package=package,
            part_name=DOCUMENT_PART,
            namespaces=NamespaceResolver(root, DOCUMENT_PART),
            relationships=relationships,
            warnings=warnings,
        )
        ctx.namespaces.resolve("w")

        body = root.find(ctx.w("body"))
        if body is None:
            raise MissingPageSizeError(f"{DOCUMENT_PART} has no w:body element")

        page_width_px, page_height_px = _page_size_px(body, ctx)

        layout = DocumentLayout(
            page_width_px=page_width_px,
            page_height_px=page_height_px,
            body=build_section(body, ctx),
            header=_optional_section(package, HEADER_PART, relationships, warnings),
            footer=_optional_section(package, FOOTER_PART, relationships, warnings),
            warnings=warnings,
        )

    layout.fields = collect_fields(layout)
    logger.info(
        f"Loaded {docx_path.name}: {len(layout.body.rows)} body rows, "
        f"{len(layout.fields)} editable fields, {len(layout.warnings)} warnings"
    )
    return layout


def validate_path(path: Union[str, Path, None]) -> Path:
    """Check the input path before touching the archive."""
    if path is None or not str(path).strip():
        raise InvalidPathError("File path must not be empty")

    docx_path = Path(path)
    if not docx_path.is_file():
        raise DocumentNotFoundError(str(docx_path))

    if docx_path.suffix.lower() != DOCX_EXTENSION:
        raise WrongFileTypeError(str(docx_path))

    return docx_path


def build_section(container: etree._Element, ctx: BuildContext) -> Section:
    """Build a Section from the block children of ``container``.

    Children without any run are dropped; each remaining child takes one
    auto-sized row.
    """
    section = Section()
    for child in container:
        if not isinstance(child.tag, str) or not has_runs(child, ctx):
            continue
        section.rows.append(build_block(child, ctx))
    return section


def build_block(elem: etree._Element, ctx: BuildContext) -> LayoutNode:
    """Dispatch a block-level element by tag: paragraph, table, or placeholder."""
    tag = localname(elem)
    try:
        if elem.tag == ctx.w("p"):
            return build_paragraph(elem, ctx)
        if elem.tag == ctx.w("tbl"):
            return build_table(elem, ctx)
    except NodeError as exc:
        ctx.warn(f"{tag} replaced by placeholder: {exc}")
        return Placeholder(reason=exc.code)

    logger.debug(f"Unsupported block element {tag} in {ctx.part_name}")
    return Placeholder(reason=f"unsupported:{tag}")


def collect_fields(layout: DocumentLayout) -> Dict[str, str]:
    """Editable field name → initial text, in page order.

    A name used twice keeps the last value.
    """
    fields: Dict[str, str] = {}
    for block in editable_blocks(layout):
        name = block.editable_field_name
        if name in fields:
            message = f"duplicate editable field '{name}', keeping the last occurrence"
            logger.warning(message)
            layout.warnings.append(message)
        fields[name] = block.content
    return fields


def _page_size_px(body: etree._Element, ctx: BuildContext):
    sect_pr = body.find(ctx.w("sectPr"))
    pg_sz = sect_pr.find(ctx.w("pgSz")) if sect_pr is not None else None
    if pg_sz is None:
        raise MissingPageSizeError(f"{DOCUMENT_PART} has no w:body/w:sectPr/w:pgSz element")

    width = parse_length(pg_sz.get(ctx.w("w")))
    height = parse_length(pg_sz.get(ctx.w("h")))
    if width is None or height is None:
        raise MissingPageSizeError(
            f"w:pgSz has invalid size w={pg_sz.get(ctx.w('w'))!r} h={pg_sz.get(ctx.w('h'))!r}"
        )
    return twips_to_px(width), twips_to_px(height)


def _optional_section(
    package: Package,
    part_name: str,
    relationships: RelationshipResolver,
    warnings: List[str],
) -> Optional[Section]:
    """Section for a header/footer part; None when the part is absent or unusable."""
    if not package.has_part(part_name):
        return None

    try:
        root = package.read_xml(part_name)
        ctx = BuildContext(
            package=package,
            part_name=part_name,
            namespaces=NamespaceResolver(root, part_name),
            relationships=relationships,
            warnings=warnings,
        )
        ctx.namespaces.resolve("w")
    except (PackageError, NodeError) as exc:
        message = f"{part_name}: skipped, {exc}"
        logger.warning(message)
        warnings.append(message)
        return None

    return build_section(root, ctx)
