"""Code128 barcodes for voucher ids."""

from __future__ import annotations

import logging
from io import BytesIO

logger = logging.getLogger(__name__)

BAR_HEIGHT_MM = 10.0


def code128_svg(value: str, *, module_height: float = BAR_HEIGHT_MM) -> str | None:
    """
    Render `value` as a Code128 SVG document.

    No human-readable text is drawn under the bars; callers print the
    truncated id themselves. Returns None if the barcode cannot be rendered.
    """
    try:
        from barcode import Code128
        from barcode.writer import SVGWriter

        buffer = BytesIO()
        Code128(value, writer=SVGWriter()).write(
            buffer,
            options={
                "module_height": module_height,
                "quiet_zone": 0.0,
                "write_text": False,
            },
        )
        return buffer.getvalue().decode("utf-8")
    except Exception as e:  # any encoder or writer failure means no barcode
        logger.warning("barcode rendering failed for %r: %s", value, e)
        return None


def strip_xml_declaration(svg: str) -> str:
    """Drop the XML prolog so the SVG can be inlined into HTML."""
    start = svg.find("<svg")
    return svg[start:] if start >= 0 else svg
