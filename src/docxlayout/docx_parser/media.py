"""Image extractor - resolve a drawing to its picture bytes and display size."""

from __future__ import annotations

import io
import logging
from typing import Tuple

from lxml import etree
from PIL import Image, UnidentifiedImageError

from docxlayout.docx_parser.context import BuildContext
from docxlayout.docx_parser.units import emu_to_px, parse_length
from docxlayout.exceptions import (
    CorruptPartError,
    MediaPartMissingError,
    MissingBlipReferenceError,
    MissingExtentError,
    PartMissingError,
    UndecodableImageError,
)
from docxlayout.ir import ImageBlock

logger = logging.getLogger(__name__)


def extract_image(drawing: etree._Element, ctx: BuildContext) -> ImageBlock:
    """Extract the picture referenced by a ``w:drawing`` element.

    The chain is: ``wp:extent`` (EMU size) → ``a:blip/@r:embed`` → the owning
    part's relationships → media part bytes → Pillow decode. Every missing
    link is an error for this image only.

    Args:
        drawing: The w:drawing element.
        ctx: Build context of the part that contains the drawing.

    Returns:
        ImageBlock sized in pixels and owning a copy of the image bytes.
    """
    width_px, height_px = _extent_px(drawing, ctx)

    a_ns = ctx.namespaces.resolve("a", drawing)
    blip = drawing.find(f".//{{{a_ns}}}blip")
    if blip is None:
        raise MissingBlipReferenceError("Drawing has no a:blip element")

    r_ns = ctx.namespaces.resolve("r", drawing)
    embed_id = blip.get(f"{{{r_ns}}}embed")
    if not embed_id:
        raise MissingBlipReferenceError("a:blip has no r:embed attribute")

    target = ctx.relationships.resolve(ctx.rels_name, embed_id)
    if ctx.relationships.get(ctx.rels_name, embed_id).is_external:
        raise MediaPartMissingError(f"Image {embed_id} links to {target} outside the package")
    try:
        data = ctx.package.read_part(target)
    except PartMissingError as exc:
        raise MediaPartMissingError(f"Media part missing for {embed_id}: {target}", cause=exc) from exc
    except CorruptPartError as exc:
        raise UndecodableImageError(f"Media part {target} is damaged: {exc}", cause=exc) from exc

    image_format, (pixel_width, pixel_height) = decode_image(data, target)
    logger.debug(f"Image {embed_id} -> {target} ({image_format} {pixel_width}x{pixel_height})")

    return ImageBlock(
        width_px=width_px,
        height_px=height_px,
        data=data,
        image_format=image_format,
        pixel_width=pixel_width,
        pixel_height=pixel_height,
    )


def decode_image(data: bytes, name: str = "") -> Tuple[str, Tuple[int, int]]:
    """Decode ``data`` with Pillow and return ``(format, (width, height))``.

    Raises:
        UndecodableImageError: Pillow cannot identify or load the bitmap.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.format or "", img.size
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
        raise UndecodableImageError(f"Cannot decode image {name}: {exc}", cause=exc) from exc


def _extent_px(drawing: etree._Element, ctx: BuildContext) -> Tuple[float, float]:
    wp_ns = ctx.namespaces.resolve("wp", drawing)
    extent = drawing.find(f".//{{{wp_ns}}}extent")
    if extent is None:
        raise MissingExtentError("Drawing has no wp:extent element")

    cx = parse_length(extent.get("cx"))
    cy = parse_length(extent.get("cy"))
    if cx is None or cy is None:
        raise MissingExtentError(
            f"wp:extent has invalid size cx={extent.get('cx')!r} cy={extent.get('cy')!r}"
        )
    return emu_to_px(cx), emu_to_px(cy)
