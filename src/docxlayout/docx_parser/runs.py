"""Run/text extractor - paragraphs into text blocks and editable fields."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from lxml import etree

from docxlayout.docx_parser.context import BuildContext
from docxlayout.docx_parser.media import extract_image
from docxlayout.exceptions import MalformedNodeError, NodeError, UnmatchedBookmarkError
from docxlayout.ir import Alignment, LayoutNode, Paragraph, Placeholder, TextBlock

# Word's "last cursor position" bookmark, never an editable field.
GOBACK_BOOKMARK = "_GoBack"


@dataclass(frozen=True)
class Segment:
    """A half-open range ``[start, end)`` of paragraph children."""

    kind: str  # "runs" | "field"
    start: int
    end: int
    name: Optional[str] = None


def build_paragraph(p: etree._Element, ctx: BuildContext) -> LayoutNode:
    """Build the layout node for a ``w:p`` element.

    A paragraph holding a drawing becomes image content only. Otherwise its
    runs are merged into text blocks, and bookmark spans become editable
    fields. One resulting block is returned as is; several are wrapped in a
    ``Paragraph``.

    Raises:
        UnmatchedBookmarkError: a bookmark starts but never ends in ``p``.
    """
    ppr_tag = ctx.w("pPr")
    children = [c for c in p if isinstance(c.tag, str) and c.tag != ppr_tag]

    drawings = list(p.iter(ctx.w("drawing")))
    if drawings:
        return _wrap([_image_block(d, ctx) for d in drawings])

    alignment = paragraph_alignment(p, ctx)

    if len(children) == 1:
        return TextBlock(content=node_text(children[0], ctx), alignment=alignment)

    if _is_pure_text(children, ctx):
        text = "".join(node_text(c, ctx) for c in children)
        return TextBlock(content=text, alignment=alignment)

    blocks: List[LayoutNode] = []
    for segment in partition_children(children, ctx):
        text = "".join(node_text(c, ctx) for c in children[segment.start:segment.end])
        blocks.append(TextBlock(content=text, alignment=alignment, editable_field_name=segment.name))

    if not blocks:
        return Placeholder(reason="no text content")
    return _wrap(blocks)


def paragraph_alignment(p: etree._Element, ctx: BuildContext) -> Alignment:
    """``center`` when ``w:pPr/w:jc`` says so, ``start`` for everything else."""
    ppr = p.find(ctx.w("pPr"))
    if ppr is None:
        return "start"
    jc = ppr.find(ctx.w("jc"))
    if jc is not None and jc.get(ctx.w("val")) == "center":
        return "center"
    return "start"


def partition_children(children: List[etree._Element], ctx: BuildContext) -> List[Segment]:
    """Split paragraph children into run sequences and bookmark spans.

    Single forward pass over ``children``; ranges never overlap and keep
    document order. Nodes that are neither runs nor named bookmark starts are
    skipped.
    """
    r_tag = ctx.w("r")
    start_tag = ctx.w("bookmarkStart")
    end_tag = ctx.w("bookmarkEnd")
    id_attr = ctx.w("id")
    name_attr = ctx.w("name")

    segments: List[Segment] = []
    count = len(children)
    i = 0
    while i < count:
        node = children[i]

        if node.tag == r_tag:
            j = i + 1
            while j < count and children[j].tag == r_tag:
                j += 1
            segments.append(Segment("runs", i, j))
            i = j
            continue

        name = node.get(name_attr) if node.tag == start_tag else None
        if name and name != GOBACK_BOOKMARK:
            bookmark_id = node.get(id_attr)
            if bookmark_id is None:
                raise MalformedNodeError(f"Bookmark '{name}' has no id")
            j = i + 1
            while j < count and not (children[j].tag == end_tag and children[j].get(id_attr) == bookmark_id):
                j += 1
            if j == count:
                raise UnmatchedBookmarkError(name, bookmark_id)
            segments.append(Segment("field", i, j + 1, name))
            i = j + 1
            continue

        i += 1

    return segments


def node_text(elem: etree._Element, ctx: BuildContext) -> str:
    """Visible text below ``elem``: ``w:t`` text, tabs and line breaks."""
    t_tag = ctx.w("t")
    tab_tag = ctx.w("tab")
    breaks = (ctx.w("br"), ctx.w("cr"))

    parts: List[str] = []
    for node in elem.iter(t_tag, tab_tag, *breaks):
        if node.tag == t_tag:
            parts.append(node.text or "")
        elif node.tag == tab_tag:
            parts.append("\t")
        else:
            parts.append("\n")
    return "".join(parts)


def has_runs(elem: etree._Element, ctx: BuildContext) -> bool:
    """True when ``elem`` has at least one ``w:r`` descendant."""
    return next(elem.iter(ctx.w("r")), None) is not None


def _is_pure_text(children: List[etree._Element], ctx: BuildContext) -> bool:
    r_tag = ctx.w("r")
    t_tag = ctx.w("t")
    start_tag = ctx.w("bookmarkStart")
    for child in children:
        if child.tag != r_tag or child.find(t_tag) is None:
            return False
        if next(child.iter(start_tag), None) is not None:
            return False
    return True


def _image_block(drawing: etree._Element, ctx: BuildContext) -> LayoutNode:
    try:
        return extract_image(drawing, ctx)
    except NodeError as exc:
        ctx.warn(f"image replaced by placeholder: {exc}")
        return Placeholder(reason=exc.code)


def _wrap(blocks: List[LayoutNode]) -> LayoutNode:
    if len(blocks) == 1:
        return blocks[0]
    return Paragraph(blocks=blocks)
