"""
PDF Content Stream Module.

Small writer for PDF page content streams: graphics state, paths, colors
and text operators. Operators are accumulated as text lines and encoded
once with the WinAnsi (cp1252) code page that the standard Type1 fonts
use; characters outside it are replaced with "?".

Author: ML Engineering Team
"""

from typing import List, Sequence, Tuple

# Bezier control distance for a quarter circle of radius 1
KAPPA = 0.552

STREAM_ENCODING = "cp1252"


def escape_pdf_string(text: str) -> str:
    """
    Escape text for a PDF literal string.

    Backslash and parentheses are escaped, carriage returns are dropped and
    line feeds become spaces.

    Args:
        text: Raw text.

    Returns:
        Text safe to place between ``(`` and ``)``.

    Example:
        >>> escape_pdf_string("Total (MXN)")
        'Total \\\\(MXN\\\\)'
    """
    if not text:
        return ""

    return (
        text.replace("\\", "\\\\")
        .replace("(", "\\(")
        .replace(")", "\\)")
        .replace("\r", "")
        .replace("\n", " ")
    )


def format_number(value: float) -> str:
    """Format a number the short way PDF writers do (no trailing zeros)."""
    if float(value).is_integer():
        return str(int(value))
    formatted = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if formatted == "-0" else formatted


class ContentStream:
    """
    Builder for a page content stream.

    Example:
        >>> stream = ContentStream()
        >>> stream.begin_text().font("F1", 24).move_text(70, 730).show_text("Hola").end_text()
        >>> stream.to_bytes()
        b'BT\\n/F1 24 Tf\\n70 730 Td\\n(Hola) Tj\\nET'
    """

    def __init__(self) -> None:
        self._operations: List[str] = []

    def _emit(self, *operands, operator: str) -> "ContentStream":
        parts = [format_number(op) if isinstance(op, (int, float)) else op for op in operands]
        parts.append(operator)
        self._operations.append(" ".join(parts))
        return self

    # -------------------------------------------------------------------------
    # Graphics state
    # -------------------------------------------------------------------------

    def save_state(self) -> "ContentStream":
        return self._emit(operator="q")

    def restore_state(self) -> "ContentStream":
        return self._emit(operator="Q")

    def transform(self, a: float, b: float, c: float, d: float, e: float, f: float) -> "ContentStream":
        """Concatenate an affine matrix to the CTM (``cm``)."""
        return self._emit(a, b, c, d, e, f, operator="cm")

    def fill_color(self, rgb: Sequence[float]) -> "ContentStream":
        r, g, b = rgb
        return self._emit(r, g, b, operator="rg")

    def stroke_color(self, rgb: Sequence[float]) -> "ContentStream":
        r, g, b = rgb
        return self._emit(r, g, b, operator="RG")

    def line_width(self, width: float) -> "ContentStream":
        return self._emit(width, operator="w")

    # -------------------------------------------------------------------------
    # Paths
    # -------------------------------------------------------------------------

    def move_to(self, x: float, y: float) -> "ContentStream":
        return self._emit(x, y, operator="m")

    def line_to(self, x: float, y: float) -> "ContentStream":
        return self._emit(x, y, operator="l")

    def curve_to(self, x1: float, y1: float, x2: float, y2: float, x3: float, y3: float) -> "ContentStream":
        return self._emit(x1, y1, x2, y2, x3, y3, operator="c")

    def close_path(self) -> "ContentStream":
        return self._emit(operator="h")

    def fill(self) -> "ContentStream":
        return self._emit(operator="f")

    def stroke(self) -> "ContentStream":
        return self._emit(operator="S")

    def rounded_rect(self, x0: float, y0: float, x1: float, y1: float, radius: float) -> "ContentStream":
        """
        Append a closed rounded rectangle path.

        Args:
            x0, y0: Lower-left corner.
            x1, y1: Upper-right corner.
            radius: Corner radius.
        """
        k = radius * KAPPA
        return (
            self.move_to(x0 + radius, y0)
            .line_to(x1 - radius, y0)
            .curve_to(x1 - radius + k, y0, x1, y0 + radius - k, x1, y0 + radius)
            .line_to(x1, y1 - radius)
            .curve_to(x1, y1 - radius + k, x1 - radius + k, y1, x1 - radius, y1)
            .line_to(x0 + radius, y1)
            .curve_to(x0 + radius - k, y1, x0, y1 - radius + k, x0, y1 - radius)
            .line_to(x0, y0 + radius)
            .curve_to(x0, y0 + radius - k, x0 + radius - k, y0, x0 + radius, y0)
            .close_path()
        )

    def circle(self, cx: float, cy: float, radius: float) -> "ContentStream":
        """Append a closed circle path made of four Bezier arcs."""
        k = radius * KAPPA
        return (
            self.move_to(cx, cy - radius)
            .curve_to(cx + k, cy - radius, cx + radius, cy - k, cx + radius, cy)
            .curve_to(cx + radius, cy + k, cx + k, cy + radius, cx, cy + radius)
            .curve_to(cx - k, cy + radius, cx - radius, cy + k, cx - radius, cy)
            .curve_to(cx - radius, cy - k, cx - k, cy - radius, cx, cy - radius)
            .close_path()
        )

    def polyline(self, points: Sequence[Tuple[float, float]]) -> "ContentStream":
        """Append an open path through the given points."""
        (x, y), rest = points[0], points[1:]
        self.move_to(x, y)
        for x, y in rest:
            self.line_to(x, y)
        return self

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def begin_text(self) -> "ContentStream":
        return self._emit(operator="BT")

    def end_text(self) -> "ContentStream":
        return self._emit(operator="ET")

    def font(self, resource: str, size: float) -> "ContentStream":
        return self._emit(f"/{resource}", size, operator="Tf")

    def move_text(self, tx: float, ty: float) -> "ContentStream":
        return self._emit(tx, ty, operator="Td")

    def show_text(self, text: str) -> "ContentStream":
        return self._emit(f"({escape_pdf_string(text)})", operator="Tj")

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._operations)

    def to_bytes(self) -> bytes:
        """Encode the accumulated operators."""
        return "\n".join(self._operations).encode(STREAM_ENCODING, errors="replace")
