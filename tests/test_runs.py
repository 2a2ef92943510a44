"""Tests for paragraph text extraction and editable fields."""

import pytest

from docxlayout.docx_parser.runs import build_paragraph, partition_children
from docxlayout.exceptions import UnmatchedBookmarkError
from docxlayout.ir import ImageBlock, Paragraph, Placeholder, TextBlock

from docx_samples import (
    body_element,
    bookmark,
    drawing,
    paragraph,
    png_bytes,
    rels_xml,
    run,
)


def _build(xml_body, parts=None):
    ctx, p = body_element(xml_body, parts)
    return build_paragraph(p, ctx), ctx


class TestSingleNodeParagraph:
    def test_centered_single_run(self):
        node, _ = _build(paragraph(run("Hello"), jc="center"))

        assert node == TextBlock(content="Hello", alignment="center")

    def test_other_justification_is_start(self):
        node, _ = _build(paragraph(run("Right"), jc="right"))

        assert node.alignment == "start"

    def test_no_properties(self):
        node, _ = _build(paragraph(run("Plain")))

        assert node == TextBlock(content="Plain")
        assert node.editable_field_name is None


class TestPureTextParagraph:
    def test_runs_are_concatenated(self):
        node, _ = _build(paragraph(run("Hello, "), run("wide "), run("world")))

        assert isinstance(node, TextBlock)
        assert node.content == "Hello, wide world"

    def test_alignment_applies(self):
        node, _ = _build(paragraph(run("a"), run("b"), jc="center"))

        assert node.alignment == "center"

    def test_tabs_and_breaks(self):
        node, _ = _build(paragraph(
            "<w:r><w:t>Name</w:t><w:tab/><w:t>Value</w:t></w:r>",
            "<w:r><w:t>Line</w:t><w:br/><w:t>Next</w:t></w:r>",
        ))

        assert node.content == "Name\tValueLine\nNext"

    def test_formatting_is_ignored(self):
        node, _ = _build(paragraph(
            "<w:r><w:rPr><w:b/></w:rPr><w:t>Bold</w:t></w:r>",
            run(" text"),
        ))

        assert node.content == "Bold text"


class TestMixedParagraph:
    def test_bookmark_only_paragraph(self):
        node, _ = _build(paragraph(bookmark("0", "RequestA", run("first "), run("second"))))

        assert node == TextBlock(content="first second", editable_field_name="RequestA")

    def test_text_then_field_then_text(self):
        node, _ = _build(paragraph(
            run("Name: "),
            run("(required) "),
            bookmark("1", "Text1", run("John")),
            run(" end"),
        ))

        assert isinstance(node, Paragraph)
        assert node.blocks == [
            TextBlock(content="Name: (required) "),
            TextBlock(content="John", editable_field_name="Text1"),
            TextBlock(content=" end"),
        ]

    def test_goback_bookmark_is_not_a_field(self):
        node, _ = _build(paragraph(
            '<w:bookmarkStart w:id="0" w:name="_GoBack"/>',
            run("Just text"),
            '<w:bookmarkEnd w:id="0"/>',
        ))

        assert node == TextBlock(content="Just text")

    def test_two_fields(self):
        node, _ = _build(paragraph(
            bookmark("1", "Text1", run("a")),
            bookmark("2", "Text2", run("b")),
        ))

        assert [b.editable_field_name for b in node.blocks] == ["Text1", "Text2"]

    def test_bookmark_end_matched_by_id(self):
        node, _ = _build(paragraph(
            '<w:bookmarkStart w:id="1" w:name="Outer"/>',
            run("x"),
            '<w:bookmarkEnd w:id="7"/>',
            run("y"),
            '<w:bookmarkEnd w:id="1"/>',
        ))

        assert node == TextBlock(content="xy", editable_field_name="Outer")

    def test_unmatched_bookmark(self):
        with pytest.raises(UnmatchedBookmarkError) as excinfo:
            _build(paragraph('<w:bookmarkStart w:id="3" w:name="Broken"/>', run("never closed"), run("!")))

        assert excinfo.value.name == "Broken"
        assert excinfo.value.bookmark_id == "3"

    def test_only_skipped_nodes(self):
        node, _ = _build(paragraph('<w:proofErr w:type="spellStart"/>', '<w:proofErr w:type="spellEnd"/>'))

        assert isinstance(node, Placeholder)


class TestPartition:
    def test_source_children_are_not_mutated(self):
        ctx, p = body_element(paragraph(run("a"), bookmark("1", "F", run("b")), run("c")))
        children = list(p)
        before = [c.tag for c in children]

        segments = partition_children(children, ctx)

        assert [c.tag for c in children] == before
        assert [(s.kind, s.start, s.end, s.name) for s in segments] == [
            ("runs", 0, 1, None),
            ("field", 1, 4, "F"),
            ("runs", 4, 5, None),
        ]


class TestImageParagraph:
    def test_drawing_wins_over_text(self):
        parts = {
            "word/_rels/document.xml.rels": rels_xml({"rId4": "media/image1.png"}),
            "word/media/image1.png": png_bytes(),
        }
        node, _ = _build(paragraph(run("caption"), drawing("rId4")), parts)

        assert isinstance(node, ImageBlock)

    def test_broken_image_becomes_placeholder(self):
        parts = {
            "word/_rels/document.xml.rels": rels_xml({"rId4": "media/image1.png"}),
            "word/media/image1.png": png_bytes(),
        }
        node, ctx = _build(paragraph(drawing("rId4"), drawing("rId404")), parts)

        assert isinstance(node, Paragraph)
        assert isinstance(node.blocks[0], ImageBlock)
        assert node.blocks[1] == Placeholder(reason="relationship_not_found")
        assert len(ctx.warnings) == 1
