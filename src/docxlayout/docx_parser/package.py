"""DOCX package store - zip container with parts indexed by base file name."""

from __future__ import annotations

import logging
import posixpath
import zipfile
import zlib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from lxml import etree

from docxlayout.exceptions import (
    CorruptPartError,
    MalformedPartError,
    NotAPackageError,
    PackageLimitError,
    PartMissingError,
)

logger = logging.getLogger(__name__)


def _xml_parser() -> etree.XMLParser:
    # Parts come from untrusted archives: no entities, no DTD loading, no network.
    return etree.XMLParser(resolve_entities=False, no_network=True, load_dtd=False, huge_tree=False)


@dataclass(frozen=True)
class PackageLimits:
    """Heuristics for rejecting probable ZIP bombs."""

    max_entries: int = 10_000
    max_part_bytes: int = 256 * 1024 * 1024  # 256 MiB
    max_compression_ratio: float = 500.0


DEFAULT_LIMITS = PackageLimits()


def _part_depth(name: str) -> int:
    return name.count("/")


class Package:
    """An opened DOCX archive.

    Entries are indexed by their base file name (``word/media/image1.png`` is
    ``image1.png``) because relationship targets are usually relative paths
    whose last segment is the only stable part. When two entries share a base
    name, the one closest to the archive root wins.
    """

    def __init__(self, zf: zipfile.ZipFile, source: str = "") -> None:
        self._zf: Optional[zipfile.ZipFile] = zf
        self.source = source
        self._entries: Dict[str, zipfile.ZipInfo] = {}

        for info in zf.infolist():
            if info.is_dir():
                continue
            base = posixpath.basename(info.filename)
            if not base:
                continue
            existing = self._entries.get(base)
            if existing is not None:
                if _part_depth(existing.filename) <= _part_depth(info.filename):
                    logger.debug(f"Ignoring {info.filename}, {existing.filename} already indexed as {base}")
                    continue
                logger.debug(f"Replacing {existing.filename} with shallower {info.filename} for {base}")
            self._entries[base] = info

    def __enter__(self) -> "Package":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def closed(self) -> bool:
        return self._zf is None

    @property
    def names(self) -> List[str]:
        """Indexed base names."""
        return list(self._entries)

    def has_part(self, name: str) -> bool:
        return posixpath.basename(name) in self._entries

    def read_part(self, name: str) -> bytes:
        """Read the bytes of a part by base name (or any path ending in it).

        Raises:
            PartMissingError: no such part.
            CorruptPartError: the entry is in the index but its data is damaged.
        """
        if self._zf is None:
            raise ValueError(f"Package is closed: {self.source}")

        info = self._entries.get(posixpath.basename(name))
        if info is None:
            raise PartMissingError(name)
        try:
            return self._zf.read(info)
        except (zipfile.BadZipFile, zlib.error, EOFError, OSError) as exc:
            raise CorruptPartError(info.filename, cause=exc) from exc

    def read_xml(self, name: str) -> etree._Element:
        """Read and parse an XML part, returning its root element.

        Raises:
            PartMissingError: no such part.
            CorruptPartError: the entry data is damaged.
            MalformedPartError: the part is not well-formed XML.
        """
        data = self.read_part(name)
        try:
            return etree.fromstring(data, parser=_xml_parser())
        except etree.XMLSyntaxError as exc:
            raise MalformedPartError(name, cause=exc) from exc

    def close(self) -> None:
        if self._zf is not None:
            self._zf.close()
            self._zf = None


def validate_archive(zf: zipfile.ZipFile, limits: PackageLimits, source: str = "") -> None:
    """Reject archives with too many entries or implausible compression ratios."""
    infos = zf.infolist()
    if len(infos) > limits.max_entries:
        raise PackageLimitError(
            f"Package has too many entries ({len(infos)} > {limits.max_entries}) [{source}]"
        )

    for info in infos:
        if info.is_dir():
            continue
        if info.file_size > limits.max_part_bytes:
            raise PackageLimitError(
                f"Part too large: {info.filename} ({info.file_size} bytes > {limits.max_part_bytes}) [{source}]"
            )
        if info.file_size > 0:
            if info.compress_size <= 0:
                raise PackageLimitError(
                    f"Part has zero compressed size but non-zero size: {info.filename} [{source}]"
                )
            ratio = info.file_size / info.compress_size
            if ratio > limits.max_compression_ratio:
                raise PackageLimitError(
                    f"Part compression ratio too high: {info.filename} "
                    f"({ratio:.1f} > {limits.max_compression_ratio}) [{source}]"
                )


def open_package(path: Union[str, Path], limits: Optional[PackageLimits] = None) -> Package:
    """Open a DOCX archive and index its parts.

    Args:
        path: Path to an existing file.
        limits: ZIP-bomb limits, ``DEFAULT_LIMITS`` when omitted.

    Returns:
        Package: caller owns it and must close it.

    Raises:
        NotAPackageError: the file is not a readable zip container.
        PackageLimitError: the archive exceeds ``limits``.
    """
    limits = limits or DEFAULT_LIMITS
    source = str(path)
    try:
        zf = zipfile.ZipFile(path, "r")
    except (zipfile.BadZipFile, zipfile.LargeZipFile) as exc:
        raise NotAPackageError(f"Not a zip package: {source}", cause=exc) from exc

    try:
        validate_archive(zf, limits, source)
    except Exception:
        zf.close()
        raise

    package = Package(zf, source)
    logger.debug(f"Opened {source} with {len(package.names)} parts")
    return package
