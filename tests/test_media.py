"""Tests for image extraction."""

import pytest

from docxlayout.docx_parser.media import decode_image, extract_image
from docxlayout.exceptions import (
    MediaPartMissingError,
    MissingBlipReferenceError,
    MissingExtentError,
    NamespaceNotDeclaredError,
    RelationshipNotFoundError,
    UndecodableImageError,
)

from docx_samples import (
    A_NS,
    PKG_REL_NS,
    R_NS,
    W_NS,
    WP_NS,
    drawing,
    make_context,
    paragraph,
    png_bytes,
    rels_xml,
    document_xml,
)

IMAGE_PARTS = {
    "word/_rels/document.xml.rels": rels_xml({"rId4": "media/image1.png"}),
    "word/media/image1.png": png_bytes((20, 10)),
}


def _drawing_context(drawing_xml, parts=IMAGE_PARTS, namespaces=None):
    kwargs = {"namespaces": namespaces} if namespaces else {}
    ctx, root = make_context(document_xml(paragraph(drawing_xml), **kwargs), parts)
    return ctx, next(root.iter(f"{{{W_NS}}}drawing"))


class TestExtractImage:
    def test_inline_picture(self):
        ctx, elem = _drawing_context(drawing("rId4", cx=914400, cy=457200))

        image = extract_image(elem, ctx)

        assert image.width_px == 96.0
        assert image.height_px == 48.0
        assert image.data == IMAGE_PARTS["word/media/image1.png"]
        assert image.image_format == "PNG"
        assert (image.pixel_width, image.pixel_height) == (20, 10)

    def test_missing_extent(self):
        xml = drawing("rId4").replace('<wp:extent cx="914400" cy="457200"/>', "")
        ctx, elem = _drawing_context(xml)

        with pytest.raises(MissingExtentError):
            extract_image(elem, ctx)

    def test_invalid_extent(self):
        xml = drawing("rId4").replace('cx="914400"', 'cx="wide"')
        ctx, elem = _drawing_context(xml)

        with pytest.raises(MissingExtentError):
            extract_image(elem, ctx)

    def test_non_finite_extent(self):
        xml = drawing("rId4").replace('cy="457200"', 'cy="1e999"')
        ctx, elem = _drawing_context(xml)

        with pytest.raises(MissingExtentError):
            extract_image(elem, ctx)

    def test_missing_blip(self):
        xml = drawing("rId4").replace('<a:blip r:embed="rId4"/>', "")
        ctx, elem = _drawing_context(xml)

        with pytest.raises(MissingBlipReferenceError):
            extract_image(elem, ctx)

    def test_missing_embed_attribute(self):
        xml = drawing("rId4").replace('r:embed="rId4"', "")
        ctx, elem = _drawing_context(xml)

        with pytest.raises(MissingBlipReferenceError):
            extract_image(elem, ctx)

    def test_dangling_relationship(self):
        ctx, elem = _drawing_context(drawing("rId5"))

        with pytest.raises(RelationshipNotFoundError):
            extract_image(elem, ctx)

    def test_missing_media_part(self):
        parts = {"word/_rels/document.xml.rels": rels_xml({"rId4": "media/image1.png"})}
        ctx, elem = _drawing_context(drawing("rId4"), parts)

        with pytest.raises(MediaPartMissingError):
            extract_image(elem, ctx)

    def test_external_target(self):
        parts = {
            "word/_rels/document.xml.rels": (
                f'<Relationships xmlns="{PKG_REL_NS}">'
                '<Relationship Id="rId4" Type="image" Target="https://example.com/logo.png" TargetMode="External"/>'
                "</Relationships>"
            ),
            # Same base name as the link target; must not be picked up
            "word/media/logo.png": png_bytes(),
        }
        ctx, elem = _drawing_context(drawing("rId4"), parts)

        with pytest.raises(MediaPartMissingError):
            extract_image(elem, ctx)

    def test_undecodable_bytes(self):
        parts = dict(IMAGE_PARTS)
        parts["word/media/image1.png"] = b"\x89PNG but not really"
        ctx, elem = _drawing_context(drawing("rId4"), parts)

        with pytest.raises(UndecodableImageError):
            extract_image(elem, ctx)

    def test_wp_prefix_must_be_declared(self):
        # Root without wp; the drawing uses a local declaration only for a:
        namespaces = f'xmlns:w="{W_NS}" xmlns:r="{R_NS}"'
        xml = drawing("rId4").replace("<wp:inline>", f'<wp:inline xmlns:wp="{WP_NS}">')
        ctx, elem = _drawing_context(xml, namespaces=namespaces)

        # Found in the drawing's subtree
        assert extract_image(elem, ctx).width_px == 96.0

        ctx, elem = _drawing_context(
            f'<w:r><w:drawing><a:blip xmlns:a="{A_NS}" r:embed="rId4"/></w:drawing></w:r>',
            namespaces=namespaces,
        )
        with pytest.raises(NamespaceNotDeclaredError):
            extract_image(elem, ctx)


class TestDecodeImage:
    def test_png(self):
        assert decode_image(png_bytes((3, 7))) == ("PNG", (3, 7))

    def test_garbage(self):
        with pytest.raises(UndecodableImageError):
            decode_image(b"not an image", "media/x.png")
