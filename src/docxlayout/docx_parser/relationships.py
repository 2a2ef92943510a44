"""Relationship resolver - maps relationship ids to target parts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from docxlayout.docx_parser.namespaces import localname
from docxlayout.docx_parser.package import Package
from docxlayout.exceptions import (
    CorruptPartError,
    MalformedPartError,
    PartMissingError,
    RelationshipNotFoundError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Relationship:
    """A single relationship record from a ``.rels`` part."""

    id: str
    target_path: str
    rel_type: str = ""
    target_mode: str = "Internal"

    @property
    def is_external(self) -> bool:
        return self.target_mode == "External"


def rels_name_for(part_name: str) -> str:
    """Name of the relationships part that belongs to ``part_name``.

    ``document.xml`` -> ``document.xml.rels``
    """
    return f"{part_name.rsplit('/', 1)[-1]}.rels"


class RelationshipResolver:
    """Parses ``.rels`` parts on demand and caches them for one load."""

    def __init__(self, package: Package) -> None:
        self._package = package
        self._cache: Dict[str, Dict[str, Relationship]] = {}

    def relationships(self, rels_name: str) -> Dict[str, Relationship]:
        """All relationships declared in ``rels_name``.

        Empty when the part is absent or unreadable, so every lookup in it
        fails with RelationshipNotFoundError.
        """
        cached = self._cache.get(rels_name)
        if cached is not None:
            return cached

        try:
            root = self._package.read_xml(rels_name)
        except PartMissingError:
            logger.debug(f"No relationships part {rels_name}")
            rels: Dict[str, Relationship] = {}
        except (CorruptPartError, MalformedPartError) as exc:
            logger.warning(f"Ignoring unreadable relationships part {rels_name}: {exc}")
            rels = {}
        else:
            rels = _parse_relationships(root)
            logger.debug(f"Parsed {len(rels)} relationships from {rels_name}")

        self._cache[rels_name] = rels
        return rels

    def get(self, rels_name: str, rel_id: str) -> Optional[Relationship]:
        return self.relationships(rels_name).get(rel_id)

    def resolve(self, rels_name: str, rel_id: str) -> str:
        """Target path of ``rel_id`` in ``rels_name``.

        Raises:
            RelationshipNotFoundError: no relationship with that id.
        """
        rel = self.get(rels_name, rel_id)
        if rel is None:
            raise RelationshipNotFoundError(rels_name, rel_id)
        return rel.target_path


def _parse_relationships(root) -> Dict[str, Relationship]:
    """Parse a relationships root into an id map.

    Matched by local name: the package-relationships namespace is the default
    namespace of the part and its URI is not something we need to trust.
    """
    rels_map: Dict[str, Relationship] = {}
    for rel in root:
        if localname(rel) != "Relationship":
            continue
        rel_id = rel.get("Id")
        target = rel.get("Target")
        if rel_id and target:
            rels_map[rel_id] = Relationship(
                id=rel_id,
                target_path=target,
                rel_type=rel.get("Type", ""),
                target_mode=rel.get("TargetMode", "Internal"),
            )
    return rels_map
