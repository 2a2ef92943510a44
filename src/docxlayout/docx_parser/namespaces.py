"""Per-part namespace resolution.

Producers disagree on namespace URIs (transitional vs. strict OOXML) and on
where the drawing prefixes are declared, so URIs are read off each part's
root instead of being hard-coded. A resolver belongs to exactly one part.
"""

from __future__ import annotations

from typing import Dict, Optional

from lxml import etree

from docxlayout.exceptions import NamespaceNotDeclaredError


def localname(elem: etree._Element) -> str:
    """Local tag name without the namespace, '' for comments and PIs."""
    if not isinstance(elem.tag, str):
        return ""
    return etree.QName(elem).localname


class NamespaceResolver:
    """Prefix → URI table for one XML root."""

    def __init__(self, root: etree._Element, part_name: Optional[str] = None) -> None:
        self._root = root
        self.part_name = part_name
        self._declared: Dict[str, str] = {
            prefix: uri for prefix, uri in root.nsmap.items() if prefix
        }

    def resolve(self, prefix: str, scope: Optional[etree._Element] = None) -> str:
        """Return the URI bound to ``prefix``.

        Declarations on the root win. When the root does not declare the
        prefix and ``scope`` is given, the first declaration found inside that
        subtree is used (Word declares ``a:`` and ``pic:`` locally on drawings).

        Raises:
            NamespaceNotDeclaredError: no declaration found.
        """
        uri = self._declared.get(prefix)
        if uri is None and scope is not None:
            if scope.getroottree().getroot() is not self._root:
                raise ValueError("scope element belongs to a different part")
            for elem in scope.iter(etree.Element):
                uri = elem.nsmap.get(prefix)
                if uri:
                    break
        if not uri:
            raise NamespaceNotDeclaredError(prefix, self.part_name)
        return uri

    def tag(self, prefix: str, name: str, scope: Optional[etree._Element] = None) -> str:
        """Clark-notation name, e.g. ``{uri}p``."""
        return f"{{{self.resolve(prefix, scope)}}}{name}"
