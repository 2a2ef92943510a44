"""DOCX Parser Package - OOXML extraction modules."""

from .document import load_document, build_section, build_block, collect_fields
from .package import Package, PackageLimits, open_package
from .namespaces import NamespaceResolver
from .relationships import Relationship, RelationshipResolver
from .runs import build_paragraph, partition_children
from .media import extract_image, decode_image
from .tables import build_table
from .units import twips_to_px, emu_to_px

__all__ = [
    "load_document",
    "build_section",
    "build_block",
    "collect_fields",
    "Package",
    "PackageLimits",
    "open_package",
    "NamespaceResolver",
    "Relationship",
    "RelationshipResolver",
    "build_paragraph",
    "partition_children",
    "extract_image",
    "decode_image",
    "build_table",
    "twips_to_px",
    "emu_to_px",
]
