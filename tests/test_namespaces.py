"""Tests for per-part namespace resolution."""

import pytest
from lxml import etree

from docxlayout.docx_parser.namespaces import NamespaceResolver, localname
from docxlayout.exceptions import NamespaceNotDeclaredError

from docx_samples import A_NS, W_NS, W_STRICT_NS


class TestNamespaceResolver:
    def test_reads_declared_uri(self):
        root = etree.fromstring(f'<w:document xmlns:w="{W_NS}"/>')
        resolver = NamespaceResolver(root, "document.xml")

        assert resolver.resolve("w") == W_NS
        assert resolver.tag("w", "p") == f"{{{W_NS}}}p"

    def test_strict_uri_is_not_rewritten(self):
        root = etree.fromstring(f'<w:document xmlns:w="{W_STRICT_NS}"/>')
        assert NamespaceResolver(root).resolve("w") == W_STRICT_NS

    def test_undeclared_prefix(self):
        root = etree.fromstring(f'<w:document xmlns:w="{W_NS}"/>')
        resolver = NamespaceResolver(root, "header1.xml")

        with pytest.raises(NamespaceNotDeclaredError) as excinfo:
            resolver.resolve("wp")
        assert excinfo.value.prefix == "wp"
        assert "header1.xml" in str(excinfo.value)

    def test_scope_finds_local_declaration(self):
        root = etree.fromstring(
            f'<w:document xmlns:w="{W_NS}"><w:drawing><a:graphic xmlns:a="{A_NS}"/></w:drawing></w:document>'
        )
        drawing = root[0]
        resolver = NamespaceResolver(root)

        with pytest.raises(NamespaceNotDeclaredError):
            resolver.resolve("a")
        assert resolver.resolve("a", drawing) == A_NS

    def test_root_declaration_wins_over_scope(self):
        root = etree.fromstring(
            f'<w:document xmlns:w="{W_NS}" xmlns:a="urn:root-a">'
            f'<w:drawing><a:graphic xmlns:a="{A_NS}"/></w:drawing></w:document>'
        )
        assert NamespaceResolver(root).resolve("a", root[0]) == "urn:root-a"

    def test_scope_from_other_part_is_rejected(self):
        first = etree.fromstring(f'<w:document xmlns:w="{W_NS}"/>')
        second = etree.fromstring(f'<w:hdr xmlns:w="{W_NS}"><w:p/></w:hdr>')

        with pytest.raises(ValueError):
            NamespaceResolver(first).resolve("a", second[0])

    def test_each_root_has_its_own_table(self):
        doc = etree.fromstring(f'<w:document xmlns:w="{W_NS}"/>')
        hdr = etree.fromstring(f'<w:hdr xmlns:w="{W_STRICT_NS}"/>')

        assert NamespaceResolver(doc).resolve("w") != NamespaceResolver(hdr).resolve("w")


def test_localname():
    root = etree.fromstring(f'<w:p xmlns:w="{W_NS}"><!-- note --><w:r/></w:p>')
    assert localname(root) == "p"
    assert localname(root[0]) == ""
    assert localname(root[1]) == "r"
