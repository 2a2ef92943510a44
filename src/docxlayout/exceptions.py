"""Errors raised while loading a DOCX package into a layout tree.

Three families:

* ``InputValidationError`` and ``PackageError`` are fatal. ``load_document``
  raises them and produces no partial tree.
* ``NodeError`` covers a single paragraph, cell or image. The document builder
  absorbs it into a ``Placeholder`` and records a warning.
"""

from __future__ import annotations

from typing import Optional


class DocxLayoutError(Exception):
    """Base class for every error raised by docxlayout."""

    code: str = "docxlayout_error"

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        if cause is not None:
            self.__cause__ = cause


# Input validation


class InputValidationError(DocxLayoutError):
    code = "invalid_input"


class InvalidPathError(InputValidationError):
    code = "invalid_path"


class DocumentNotFoundError(InputValidationError):
    code = "file_not_found"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"File does not exist: {path}")


class WrongFileTypeError(InputValidationError):
    code = "wrong_file_type"

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Wrong file type, expected a Word document (.docx): {path}")


# Package structure (fatal)


class PackageError(DocxLayoutError):
    code = "package_error"


class NotAPackageError(PackageError):
    code = "not_a_package"


class PackageLimitError(PackageError):
    """The archive looks like a ZIP bomb."""

    code = "package_limit"


class PartMissingError(PackageError):
    code = "part_missing"

    def __init__(self, part_name: str, message: Optional[str] = None) -> None:
        self.part_name = part_name
        super().__init__(message or f"Part not found in package: {part_name}")


class MissingDocumentPartError(PartMissingError):
    code = "missing_document_part"


class MalformedPartError(PackageError):
    code = "malformed_part"

    def __init__(self, part_name: str, *, cause: Optional[BaseException] = None) -> None:
        self.part_name = part_name
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Part is not well-formed XML: {part_name}{detail}", cause=cause)


class CorruptPartError(PackageError):
    """A part whose compressed data cannot be read back (bad CRC, truncated deflate stream)."""

    code = "corrupt_part"

    def __init__(self, part_name: str, *, cause: Optional[BaseException] = None) -> None:
        self.part_name = part_name
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Cannot read part data: {part_name}{detail}", cause=cause)


class MissingPageSizeError(PackageError):
    code = "missing_page_size"


# Per-node errors (absorbed into placeholders)


class NodeError(DocxLayoutError):
    code = "node_error"


class NamespaceNotDeclaredError(NodeError):
    code = "namespace_not_declared"

    def __init__(self, prefix: str, part_name: Optional[str] = None) -> None:
        self.prefix = prefix
        self.part_name = part_name
        where = f" in {part_name}" if part_name else ""
        super().__init__(f"Namespace prefix '{prefix}' is not declared{where}")


class MalformedNodeError(NodeError):
    code = "malformed_node"


class UnmatchedBookmarkError(NodeError):
    code = "unmatched_bookmark"

    def __init__(self, name: str, bookmark_id: str) -> None:
        self.name = name
        self.bookmark_id = bookmark_id
        super().__init__(f"Bookmark '{name}' (id {bookmark_id}) has no matching end in its paragraph")


class ImageError(NodeError):
    code = "image_error"


class MissingExtentError(ImageError):
    code = "missing_extent"


class MissingBlipReferenceError(ImageError):
    code = "missing_blip_reference"


class RelationshipNotFoundError(ImageError):
    code = "relationship_not_found"

    def __init__(self, rels_name: str, rel_id: str) -> None:
        self.rels_name = rels_name
        self.rel_id = rel_id
        super().__init__(f"Relationship '{rel_id}' not found in {rels_name}")


class MediaPartMissingError(ImageError):
    code = "media_part_missing"


class UndecodableImageError(ImageError):
    code = "undecodable_image"


# Field bindings


class ReadOnlyFieldError(DocxLayoutError):
    code = "read_only"
