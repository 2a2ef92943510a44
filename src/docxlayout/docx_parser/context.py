"""Per-part state threaded through the block builders."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from docxlayout.docx_parser.namespaces import NamespaceResolver
from docxlayout.docx_parser.package import Package
from docxlayout.docx_parser.relationships import RelationshipResolver, rels_name_for

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
    """Everything a builder needs while walking one part.

    ``namespaces`` is specific to ``part_name``; ``relationships`` and
    ``warnings`` are shared by every part of the same load.
    """

    package: Package
    part_name: str
    namespaces: NamespaceResolver
    relationships: RelationshipResolver
    warnings: List[str] = field(default_factory=list)

    @property
    def rels_name(self) -> str:
        return rels_name_for(self.part_name)

    def w(self, name: str) -> str:
        """Clark name in the part's WordprocessingML namespace."""
        return self.namespaces.tag("w", name)

    def warn(self, message: str) -> None:
        message = f"{self.part_name}: {message}"
        logger.warning(message)
        self.warnings.append(message)
