"""
Document Stamper Module.

This module provides the DocumentStamper class that synthesizes the
stamped output document: a single A4 page carrying the enrichment title,
summary and contact block, the extracted fiscal fields and the template
footer, drawn over a set of decorative rotated cards.

The stamper never raises. Any failure while generating the page returns
the caller's original bytes unchanged (or a blank one-page document when
there are none).

Author: ML Engineering Team
"""

import re
from typing import List, Mapping, Optional, Tuple

from config import get_config
from fiscal_stamp.fiscal_extraction import FiscalData
from fiscal_stamp.utils.helpers import wrap_words
from fiscal_stamp.utils.logger import get_logger
from .content_stream import ContentStream
from .pdf_builder import build_single_page_document

# Initialize module logger
logger = get_logger(__name__)


EMAIL_PATTERN = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')

# Rotation of roughly 40 degrees applied to every decorative card
CARD_ROTATION = (0.766, 0.643, -0.643, 0.766)

# (translate x, translate y, color key, right edge, top edge)
DECORATIVE_CARDS = (
    (-50, 700, "cyan", 130, 60),
    (430, 750, "cyan", 235, 45),
    (445, 685, "magenta", 275, 45),
    (550, 635, "green", 115, 45),
)

DEFAULT_COLORS = {
    "cyan": [0.392, 0.78, 0.804],
    "magenta": [0.929, 0.188, 0.537],
    "green": [0.647, 0.8, 0.333],
    "rule": [0.7, 0.7, 0.7],
    "phone": [0.165, 0.639, 0.376],
    "phone_icon": [0.145, 0.827, 0.4],
}

# Chat bubble outline drawn inside the phone icon
PHONE_BUBBLE = (
    (47.4, 37.0), (47.0, 38.2), (48.7, 37.4), (50.0, 37.5), (52.2, 37.1),
    (53.6, 35.7), (54.0, 33.5), (53.6, 31.3), (52.2, 29.9), (50.0, 29.5),
    (47.8, 29.9), (46.4, 31.3), (46.0, 33.5), (46.4, 35.5), (47.4, 37.0),
)

FISCAL_LABELS = (
    ("RFC", "RFC"),
    ("Periodo", "periodo"),
    ("Monto total", "monto_total"),
    ("Fecha de emisión", "fecha_emision"),
    ("Emisor", "nombre_emisor"),
    ("Tipo", "tipo_comprobante"),
)


def _build_blank_document() -> bytes:
    return build_single_page_document(b"")


# Built at import so it stays available when page generation is broken
BLANK_DOCUMENT = _build_blank_document()


class DocumentStamper:
    """
    Generates the stamped single-page output document.

    Layout (points, origin bottom-left of an A4 page):
        - four rotated rounded cards along the top edge
        - title at (70, 730), Helvetica-Bold 24, wrapped at 30 chars
        - summary below it, Helvetica 14, wrapped at 70 chars
        - extracted fiscal fields below the summary
        - grey rule at y=75 with the footer text under it
        - contact block at (405, 90), wrapped at 60 chars
        - email at (405, 35), phone line at (62, 30)

    Example:
        >>> stamper = DocumentStamper()
        >>> pdf_bytes = stamper.stamp(fiscal_data, 85, "a@b.com", "Factura", "", "")
        >>> pdf_bytes[:8]
        b'%PDF-1.4'
    """

    def __init__(self) -> None:
        """Initialize the stamper from configuration."""
        self.page_width = get_config("stamp.page.width", 595)
        self.page_height = get_config("stamp.page.height", 842)

        self.bold_font = get_config("stamp.fonts.bold", "Helvetica-Bold")
        self.regular_font = get_config("stamp.fonts.regular", "Helvetica")

        self.title_wrap = get_config("stamp.layout.title_wrap", 30)
        self.summary_wrap = get_config("stamp.layout.summary_wrap", 70)
        self.contact_wrap = get_config("stamp.layout.contact_wrap", 60)
        self.summary_max_lines = get_config("stamp.layout.summary_max_lines", 18)

        self.title_size = get_config("stamp.layout.title_size", 24)
        self.title_leading = get_config("stamp.layout.title_leading", 28)
        self.summary_size = get_config("stamp.layout.summary_size", 14)
        self.summary_leading = get_config("stamp.layout.summary_leading", 18)
        self.contact_size = get_config("stamp.layout.contact_size", 12)
        self.contact_leading = get_config("stamp.layout.contact_leading", 16)

        self.colors = dict(DEFAULT_COLORS)
        self.colors.update(get_config("stamp.colors", {}) or {})

        self.phone = get_config("stamp.footer.phone", "") or ""
        self.untitled_label = get_config("stamp.untitled_label", "Untitled")
        self.empty_summary_label = get_config(
            "stamp.empty_summary_label",
            "No hay resumen disponible."
        )

    def stamp(
        self,
        fiscal_data: Optional[FiscalData],
        confidence_score: int,
        vendor_email: Optional[str] = "",
        title: Optional[str] = "",
        summary: Optional[str] = "",
        contact_info: Optional[str] = "",
        original_bytes: Optional[bytes] = b"",
        footer_text: Optional[str] = "",
        extra_fields: Optional[Mapping[str, str]] = None,
        field_values: Optional[Mapping[str, str]] = None
    ) -> bytes:
        """
        Generate the stamped document.

        Args:
            fiscal_data: Extracted fiscal fields.
            confidence_score: Extraction confidence 0..100.
            vendor_email: Shown when the contact text has no email.
            title: Document title.
            summary: Document summary.
            contact_info: Contact block text.
            original_bytes: Returned unchanged if generation fails.
            footer_text: Resolved footer line.
            extra_fields: Additional labelled values (cover page fields).
            field_values: Final field map; its values replace the extracted
                ones in the fiscal block.

        Returns:
            PDF bytes; never empty.
        """
        try:
            content = self._render_page(
                fiscal_data or FiscalData(),
                confidence_score,
                vendor_email or "",
                title or "",
                summary or "",
                contact_info or "",
                footer_text or "",
                extra_fields or {},
                field_values or {}
            )

            document = build_single_page_document(
                content,
                fonts={"F1": self.bold_font, "F2": self.regular_font},
                width=self.page_width,
                height=self.page_height
            )

            logger.info(f"Stamped document created ({len(document)} bytes)")
            return document

        except Exception as e:
            logger.warning(f"Stamping failed, returning original document: {e}")
            if original_bytes:
                return original_bytes
            return BLANK_DOCUMENT

    # -------------------------------------------------------------------------
    # Layout
    # -------------------------------------------------------------------------

    def _render_page(
        self,
        fiscal_data: FiscalData,
        confidence_score: int,
        vendor_email: str,
        title: str,
        summary: str,
        contact_info: str,
        footer_text: str,
        extra_fields: Mapping[str, str],
        field_values: Mapping[str, str]
    ) -> bytes:
        stream = ContentStream()

        self._draw_cards(stream)
        self._draw_body(
            stream, title, summary, fiscal_data, confidence_score, extra_fields, field_values
        )
        self._draw_footer(stream, footer_text)
        self._draw_contact(stream, contact_info, vendor_email)

        if self.phone:
            self._draw_phone(stream)

        return stream.to_bytes()

    def _draw_cards(self, stream: ContentStream) -> None:
        for tx, ty, color, right, top in DECORATIVE_CARDS:
            (stream.save_state()
                .transform(*CARD_ROTATION, tx, ty)
                .fill_color(self.colors[color])
                .rounded_rect(-15, -30, right, top, 10)
                .fill()
                .restore_state())

    def _draw_body(
        self,
        stream: ContentStream,
        title: str,
        summary: str,
        fiscal_data: FiscalData,
        confidence_score: int,
        extra_fields: Mapping[str, str],
        field_values: Mapping[str, str]
    ) -> None:
        title_lines = wrap_words(title, self.title_wrap) or [self.untitled_label]

        summary_lines = wrap_words(summary, self.summary_wrap)
        if len(summary_lines) > self.summary_max_lines:
            summary_lines = summary_lines[:self.summary_max_lines]
            summary_lines[-1] += " ..."
        summary_lines = summary_lines or [self.empty_summary_label]

        stream.begin_text().font("F1", self.title_size).move_text(70, 730)
        stream.show_text(title_lines[0])
        for line in title_lines[1:]:
            stream.move_text(0, -self.title_leading).show_text(line)

        stream.fill_color((0, 0, 0)).font("F2", self.summary_size).move_text(0, -50)
        for line in summary_lines:
            stream.show_text(line).move_text(0, -self.summary_leading)

        stream.font("F1", 12).move_text(0, -12).show_text("Datos fiscales")
        stream.font("F2", 11)
        lines = self._fiscal_lines(fiscal_data, confidence_score, extra_fields, field_values)
        for label, value in lines:
            stream.move_text(0, -15).show_text(f"{label}: {value}")

        stream.end_text()

    def _fiscal_lines(
        self,
        fiscal_data: FiscalData,
        confidence_score: int,
        extra_fields: Mapping[str, str],
        field_values: Mapping[str, str]
    ) -> List[Tuple[str, str]]:
        fields = fiscal_data.to_fields()
        overrides = {key: field_values[key] for key in fields if field_values.get(key)}
        fields.update(overrides)

        lines = []
        for label, key in FISCAL_LABELS:
            value = fields[key]
            if key == "monto_total" and value[:1].isdigit():
                value = f"${value}"
            lines.append((label, value))
        lines.append(("Confianza", f"{confidence_score}%"))
        lines.extend((name, value) for name, value in extra_fields.items())
        return lines

    def _draw_footer(self, stream: ContentStream, footer_text: str) -> None:
        (stream.save_state()
            .stroke_color(self.colors["rule"])
            .line_width(1)
            .polyline([(30, 75), (565, 75)])
            .stroke()
            .restore_state())

        if not footer_text:
            return

        stream.begin_text().fill_color((0, 0, 0)).font("F2", 9).move_text(30, 62)
        for index, line in enumerate(wrap_words(footer_text, 60)[:2]):
            if index:
                stream.move_text(0, -10)
            stream.show_text(line)
        stream.end_text()

    def _draw_contact(self, stream: ContentStream, contact_info: str, vendor_email: str) -> None:
        email_match = EMAIL_PATTERN.search(contact_info)
        email = email_match.group(0) if email_match else vendor_email

        # The email is drawn on its own line below the block
        contact_text = EMAIL_PATTERN.sub("", contact_info, count=1) if email_match else contact_info
        contact_lines = wrap_words(" ".join(contact_text.split()), self.contact_wrap)

        if contact_lines:
            stream.begin_text().fill_color((0, 0, 0)).font("F2", self.contact_size).move_text(405, 90)
            for line in contact_lines:
                stream.show_text(line).move_text(0, -self.contact_leading)
            stream.end_text()

        if email:
            (stream.begin_text()
                .fill_color((0, 0, 0))
                .font("F2", 10)
                .move_text(405, 35)
                .show_text(email)
                .end_text())

    def _draw_phone(self, stream: ContentStream) -> None:
        (stream.save_state()
            .fill_color(self.colors["phone_icon"])
            .circle(50, 33, 5)
            .fill()
            .stroke_color((1, 1, 1))
            .line_width(0.5)
            .polyline(PHONE_BUBBLE)
            .close_path()
            .stroke()
            .restore_state())

        (stream.begin_text()
            .font("F1", 13)
            .move_text(62, 30)
            .fill_color(self.colors["phone"])
            .show_text(self.phone)
            .end_text())
