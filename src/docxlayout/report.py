"""Report Generator - JSON export and statistics for a layout tree."""

from __future__ import annotations

import base64
import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

from docxlayout.ir import (
    DocumentLayout,
    ImageBlock,
    Paragraph,
    Placeholder,
    Table,
    TextBlock,
    iter_nodes,
)


@dataclass
class LayoutReport:
    """Counts of what a load produced."""

    input_file: str = ""
    page_width_px: float = 0.0
    page_height_px: float = 0.0

    # Node counts across header, body and footer
    text_blocks: int = 0
    editable_fields: int = 0
    images: int = 0
    tables: int = 0
    paragraphs: int = 0
    placeholders: int = 0

    has_header: bool = False
    has_footer: bool = False

    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return asdict(self)

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


def generate_report(layout: DocumentLayout, input_path: Path) -> LayoutReport:
    """Summarize a layout tree.

    Args:
        layout: The loaded layout.
        input_path: Path of the source .docx file.

    Returns:
        LayoutReport with node counts and warnings.
    """
    report = LayoutReport(
        input_file=str(input_path),
        page_width_px=layout.page_width_px,
        page_height_px=layout.page_height_px,
        has_header=layout.header is not None,
        has_footer=layout.footer is not None,
        editable_fields=len(layout.fields),
        warnings=list(layout.warnings),
    )

    for section in layout.sections():
        for node in iter_nodes(section):
            if isinstance(node, TextBlock):
                report.text_blocks += 1
            elif isinstance(node, ImageBlock):
                report.images += 1
            elif isinstance(node, Table):
                report.tables += 1
            elif isinstance(node, Paragraph):
                report.paragraphs += 1
            elif isinstance(node, Placeholder):
                report.placeholders += 1

    return report


def layout_to_dict(layout: DocumentLayout, include_images: bool = False) -> Dict[str, Any]:
    """Convert a layout tree to plain JSON-compatible data.

    Image bytes are base64 encoded under ``data`` when ``include_images`` is
    set; otherwise only ``byte_length`` is written.
    """

    def dict_factory(items: List[Tuple[str, Any]]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in items:
            if isinstance(value, bytes):
                result["byte_length"] = len(value)
                if include_images:
                    result[key] = base64.b64encode(value).decode("ascii")
                continue
            result[key] = value
        return result

    return asdict(layout, dict_factory=dict_factory)


def layout_to_json(layout: DocumentLayout, include_images: bool = False, indent: int = 2) -> str:
    """Convert a layout tree to a JSON string."""
    return json.dumps(layout_to_dict(layout, include_images=include_images), indent=indent, ensure_ascii=False)


def save_layout(layout: DocumentLayout, output_path: Path, include_images: bool = False) -> None:
    """Write the layout tree as JSON."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(layout_to_json(layout, include_images=include_images), encoding="utf-8")
