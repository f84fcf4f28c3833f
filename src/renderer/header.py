"""
Header and Party Layout Module.

Places the first-page header: optional logo, the title, the invoice
date, and the "Bill From" / "Bill To" blocks.

The logo is stretched into its fixed box. It is scaled to fill the box
exactly and never cropped, so its aspect ratio is not preserved.

Table start policy: the table starts at the configured offset. Only
when the party blocks grow below that offset (long multi-line
addresses) does it move down to sit a fixed gap under the lowest party
line.

Party blocks never run past the content bottom. Lines that would land
below it are dropped and the last kept line ends with "...".

Author: ML Engineering Team
"""

import io
import math
from typing import List, Optional

from PIL import Image, UnidentifiedImageError

from src.invoice_model import Invoice
from src.utils.logger import get_logger
from src.utils.exceptions import InvalidImageError
from .elements import ImageElement, PageLayout, TextElement
from .settings import LayoutSettings
from .text_fitting import ellipsize, wrap_text

# Initialize module logger
logger = get_logger(__name__)

# Modes the PDF encoder embeds without conversion
EMBEDDABLE_MODES = ("RGB", "RGBA", "L")


def decode_logo_image(data: bytes) -> Image.Image:
    """
    Decode logo bytes into a Pillow image ready for embedding.

    Palette and other modes are converted to RGB, or RGBA when the
    source carries transparency.

    Args:
        data: Raw raster image bytes (PNG, JPEG, ...).

    Returns:
        Fully loaded PIL Image.

    Raises:
        InvalidImageError: If the bytes are not a decodable image.
    """
    try:
        image = Image.open(io.BytesIO(data))
        image.load()

        if image.mode not in EMBEDDABLE_MODES:
            has_alpha = "A" in image.mode or "transparency" in image.info
            image = image.convert("RGBA" if has_alpha else "RGB")
    # Pillow reports some truncated files as SyntaxError or EOFError
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError,
            ValueError, SyntaxError, EOFError) as e:
        logger.error(f"Logo decode failed: {e}")
        raise InvalidImageError(str(e), size=len(data)) from e

    logger.debug(f"Logo decoded: {image.width}x{image.height} {image.mode}")
    return image


class HeaderLayout:
    """
    Lays out the fixed header band of the first page.

    Attributes:
        settings: Document layout settings

    Example:
        >>> header = HeaderLayout(LayoutSettings())
        >>> party_bottom = header.layout(page, invoice, logo=None)
        >>> start_y = header.table_start(party_bottom)
    """

    def __init__(self, settings: LayoutSettings) -> None:
        self.settings = settings

    def layout(self, page: PageLayout, invoice: Invoice, logo: Optional[Image.Image]) -> float:
        """
        Add header elements to ``page``.

        Args:
            page: First page of the document.
            invoice: Snapshot supplying party texts and date.
            logo: Decoded logo, or None to leave the logo box empty.

        Returns:
            Baseline of the lowest party line.
        """
        s = self.settings

        if logo is not None:
            page.add(ImageElement(logo, s.logo_x, s.logo_y, s.logo_width, s.logo_height))

        page.add(TextElement(
            s.title_text, s.content_right, s.title_y,
            s.font_bold, s.title_font_size, align="right", role="title"
        ))

        if invoice.date:
            page.add(TextElement(
                f"{s.date_label} {invoice.date}", s.content_right, s.date_y,
                s.font_regular, s.date_font_size, align="right", role="date"
            ))

        from_bottom = self._party_block(
            page, s.bill_from_x, "bill_from",
            [s.bill_from_heading,
             f"{s.bill_from_name_label} {invoice.business_name}",
             f"{s.bill_from_address_label} {invoice.business_address}"]
        )
        to_bottom = self._party_block(
            page, s.bill_to_x, "bill_to",
            [s.bill_to_heading,
             f"{s.bill_to_name_label} {invoice.recipient_name}",
             f"{s.bill_to_address_label} {invoice.recipient_address}"]
        )
        return max(from_bottom, to_bottom)

    def max_party_lines(self) -> int:
        """Lines a party block may hold with its last baseline above ``content_bottom``."""
        s = self.settings
        return 1 + max(0, math.floor((s.content_bottom - s.party_y) / s.party_line_spacing))

    def _party_block(self, page: PageLayout, x: float, role: str, entries: List[str]) -> float:
        s = self.settings
        lines = [
            line
            for entry in entries
            for line in wrap_text(entry, s.party_column_width, s.font_regular, s.party_font_size)
        ]

        limit = self.max_party_lines()
        if len(lines) > limit:
            logger.warning(f"{role} block has {len(lines)} lines; keeping {limit}")
            lines = lines[:limit]
            lines[-1] = ellipsize(lines[-1], s.party_column_width, s.font_regular,
                                  s.party_font_size, force=True)

        y = s.party_y
        for number, line in enumerate(lines):
            y = s.party_y + number * s.party_line_spacing
            page.add(TextElement(line, x, y, s.font_regular, s.party_font_size, role=role))

        return y

    def table_start(self, party_bottom: float) -> float:
        """Top of the item table on the first page."""
        s = self.settings
        start = max(s.table_start_y, party_bottom + s.table_party_gap)
        if start != s.table_start_y:
            logger.debug(f"Party blocks reach y={party_bottom:.1f}; table moved to y={start:.1f}")
        return start
