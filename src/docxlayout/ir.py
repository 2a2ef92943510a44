"""Layout tree for Word documents.

This module defines the toolkit-neutral structures produced by the parser:
DOCX package → LayoutNode tree → renderer

All geometry is stored in display pixels.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Union

Alignment = Literal["start", "center"]

DEFAULT_BORDER_PX = 1.0
DEFAULT_BORDER_COLOR = "gray"


@dataclass
class TextBlock:
    """A text field, optionally bound to an editable bookmark name."""

    content: str
    alignment: Alignment = "start"
    editable_field_name: Optional[str] = None
    kind: str = field(default="text", init=False)

    @property
    def is_editable(self) -> bool:
        return bool(self.editable_field_name)


@dataclass
class ImageBlock:
    """An embedded picture with its display size and raw bytes."""

    width_px: float
    height_px: float
    data: bytes = b""
    image_format: Optional[str] = None  # Pillow format name, e.g. "PNG"
    pixel_width: Optional[int] = None  # decoded bitmap size
    pixel_height: Optional[int] = None
    kind: str = field(default="image", init=False)


@dataclass
class Placeholder:
    """Empty or unsupported node. Still occupies a grid slot."""

    reason: Optional[str] = None
    kind: str = field(default="placeholder", init=False)


@dataclass
class Paragraph:
    """Blocks from one source paragraph, laid out left to right."""

    blocks: List["LayoutNode"] = field(default_factory=list)
    kind: str = field(default="paragraph", init=False)


@dataclass
class TableCell:
    """A single table cell."""

    content: Optional["LayoutNode"] = None
    column_span: int = 1
    borderless: bool = False
    column: int = 0  # first grid slot occupied

    @property
    def border_px(self) -> float:
        return 0.0 if self.borderless else DEFAULT_BORDER_PX

    @property
    def border_color(self) -> str:
        return "transparent" if self.borderless else DEFAULT_BORDER_COLOR


@dataclass
class TableRow:
    """A table row. ``min_height_px`` of None means auto-size."""

    cells: List[TableCell] = field(default_factory=list)
    min_height_px: Optional[float] = None

    @property
    def span_total(self) -> int:
        return sum(cell.column_span for cell in self.cells)


@dataclass
class Table:
    """A table laid out on a shared column grid."""

    rows: List[TableRow] = field(default_factory=list)
    column_widths_px: List[float] = field(default_factory=list)  # empty when no w:tblGrid
    column_count: int = 0
    kind: str = field(default="table", init=False)


@dataclass
class Section:
    """Vertical stack of blocks (body, header or footer). Every row is auto-sized."""

    rows: List["LayoutNode"] = field(default_factory=list)
    kind: str = field(default="section", init=False)

    @property
    def row_sizing(self) -> List[str]:
        return ["auto"] * len(self.rows)


LayoutNode = Union[TextBlock, ImageBlock, Placeholder, Paragraph, Table, Section]


@dataclass
class DocumentLayout:
    """Root of the layout tree."""

    page_width_px: float
    page_height_px: float
    body: Section = field(default_factory=Section)
    header: Optional[Section] = None
    footer: Optional[Section] = None

    # Editable field name -> initial text
    fields: Dict[str, str] = field(default_factory=dict)

    # Diagnostics for nodes that were replaced by placeholders
    warnings: List[str] = field(default_factory=list)

    def sections(self) -> List[Section]:
        """Sections in page order: header, body, footer."""
        return [s for s in (self.header, self.body, self.footer) if s is not None]


def iter_nodes(node: LayoutNode):
    """Yield ``node`` and every node below it in document order."""
    yield node
    if isinstance(node, Section):
        for child in node.rows:
            yield from iter_nodes(child)
    elif isinstance(node, Paragraph):
        for child in node.blocks:
            yield from iter_nodes(child)
    elif isinstance(node, Table):
        for row in node.rows:
            for cell in row.cells:
                if cell.content is not None:
                    yield from iter_nodes(cell.content)


def editable_blocks(layout: DocumentLayout) -> List[TextBlock]:
    """All editable text blocks in page order."""
    blocks: List[TextBlock] = []
    for section in layout.sections():
        for node in iter_nodes(section):
            if isinstance(node, TextBlock) and node.is_editable:
                blocks.append(node)
    return blocks
