"""docxlayout - build renderer-neutral layout trees from .docx packages."""

from docxlayout.docx_parser import load_document
from docxlayout.fields import FieldBindings
from docxlayout.ir import (
    DocumentLayout,
    ImageBlock,
    Paragraph,
    Placeholder,
    Section,
    Table,
    TableCell,
    TableRow,
    TextBlock,
)

__version__ = "0.1.0"

__all__ = [
    "load_document",
    "FieldBindings",
    "DocumentLayout",
    "ImageBlock",
    "Paragraph",
    "Placeholder",
    "Section",
    "Table",
    "TableCell",
    "TableRow",
    "TextBlock",
]
