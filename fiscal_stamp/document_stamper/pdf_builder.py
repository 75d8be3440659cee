"""
PDF Document Builder Module.

Minimal PDF 1.4 writer: an object table, a cross-reference table and a
trailer. Object bodies are supplied as bytes; the builder numbers them,
computes stream lengths and byte offsets, and serializes the file.

Author: ML Engineering Team
"""

from typing import List, Optional

from fiscal_stamp.utils.exceptions import StampGenerationFailure
from fiscal_stamp.utils.logger import get_logger

# Initialize module logger
logger = get_logger(__name__)

# Header comment with high-bit bytes marks the file as binary
PDF_HEADER = b"%PDF-1.4\n%\xe2\xe3\xcf\xd3\n"


class PdfDocumentBuilder:
    """
    Builds a PDF file from an object table.

    Objects are numbered from 1 in the order they are added or reserved.
    Reserving a number first lets objects reference each other before
    their bodies are known (a page refers to its parent and vice versa).

    Example:
        >>> builder = PdfDocumentBuilder()
        >>> catalog = builder.reserve()
        >>> pages = builder.reserve()
        >>> builder.set_object(catalog, b"<< /Type /Catalog /Pages 2 0 R >>")
        >>> builder.set_object(pages, b"<< /Type /Pages /Kids [] /Count 0 >>")
        >>> pdf_bytes = builder.build(root=catalog)
    """

    def __init__(self) -> None:
        self._objects: List[Optional[bytes]] = []

    @property
    def object_count(self) -> int:
        return len(self._objects)

    def reserve(self) -> int:
        """Reserve an object number for a body set later."""
        self._objects.append(None)
        return len(self._objects)

    def set_object(self, number: int, body: bytes) -> None:
        """
        Set the body of a reserved object.

        Raises:
            StampGenerationFailure: If the number was never reserved.
        """
        if not 1 <= number <= len(self._objects):
            raise StampGenerationFailure(f"object {number} was not reserved")
        self._objects[number - 1] = body

    def add_object(self, body: bytes) -> int:
        """Add an object and return its number."""
        number = self.reserve()
        self.set_object(number, body)
        return number

    def add_stream(self, data: bytes, entries: bytes = b"") -> int:
        """
        Add a stream object; the /Length entry is computed from the data.

        Args:
            data: Raw stream content.
            entries: Extra dictionary entries, e.g. b"/Filter /FlateDecode".

        Returns:
            Object number of the stream.
        """
        dictionary = b"<< /Length %d" % len(data)
        if entries:
            dictionary += b" " + entries
        dictionary += b" >>"
        return self.add_object(dictionary + b"\nstream\n" + data + b"\nendstream")

    @staticmethod
    def reference(number: int) -> bytes:
        """Indirect reference to an object, e.g. b"4 0 R"."""
        return b"%d 0 R" % number

    def build(self, root: int) -> bytes:
        """
        Serialize the document.

        Args:
            root: Object number of the document catalog.

        Returns:
            Complete PDF file bytes.

        Raises:
            StampGenerationFailure: If an object was reserved but never set
                or the root is not a known object.
        """
        missing = [i + 1 for i, body in enumerate(self._objects) if body is None]
        if missing:
            raise StampGenerationFailure(f"objects without a body: {missing}")
        if not 1 <= root <= len(self._objects):
            raise StampGenerationFailure(f"root object {root} does not exist")

        output = bytearray(PDF_HEADER)
        offsets = []

        for number, body in enumerate(self._objects, start=1):
            offsets.append(len(output))
            output += b"%d 0 obj\n" % number
            output += body
            output += b"\nendobj\n"

        xref_offset = len(output)
        size = len(self._objects) + 1

        output += b"xref\n0 %d\n" % size
        output += b"0000000000 65535 f \n"
        for offset in offsets:
            output += b"%010d 00000 n \n" % offset

        output += b"trailer\n<< /Size %d /Root %d 0 R >>\n" % (size, root)
        output += b"startxref\n%d\n%%%%EOF\n" % xref_offset

        logger.debug(f"Built PDF with {len(self._objects)} objects ({len(output)} bytes)")
        return bytes(output)


def build_single_page_document(
    content: bytes,
    fonts: Optional[dict] = None,
    width: int = 595,
    height: int = 842
) -> bytes:
    """
    Build a one-page document around a content stream.

    Args:
        content: Page content stream bytes.
        fonts: Resource name to BaseFont name, e.g. {"F1": "Helvetica-Bold"}.
        width: Page width in points.
        height: Page height in points.

    Returns:
        Complete PDF file bytes.
    """
    builder = PdfDocumentBuilder()

    catalog = builder.reserve()
    pages = builder.reserve()
    page = builder.reserve()
    contents = builder.add_stream(content)

    font_entries = []
    for resource, base_font in (fonts or {}).items():
        font = builder.add_object(
            b"<< /Type /Font /Subtype /Type1 /BaseFont /%s /Encoding /WinAnsiEncoding >>"
            % base_font.encode("ascii")
        )
        font_entries.append(b"/%s %s" % (resource.encode("ascii"), builder.reference(font)))

    builder.set_object(
        catalog,
        b"<< /Type /Catalog /Pages %s >>" % builder.reference(pages)
    )
    builder.set_object(
        pages,
        b"<< /Type /Pages /Kids [%s] /Count 1 >>" % builder.reference(page)
    )
    builder.set_object(
        page,
        b"<< /Type /Page /Parent %s /MediaBox [0 0 %d %d] /Contents %s"
        b" /Resources << /Font << %s >> >> >>"
        % (
            builder.reference(pages),
            width,
            height,
            builder.reference(contents),
            b" ".join(font_entries)
        )
    )

    return builder.build(root=catalog)
