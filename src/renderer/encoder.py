"""
PDF Encoder Module.

Turns laid-out pages into PDF bytes with the reportlab canvas.

Layout coordinates are millimetres from the top-left corner; the
encoder flips them into PDF points from the bottom-left corner. The
canvas runs in invariant mode, so identical pages always produce
identical bytes.

Author: ML Engineering Team
"""

import io
from datetime import datetime
from typing import Optional, Sequence

from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from src.utils.logger import get_logger
from src.utils.exceptions import EncodingFailureError, InvalidImageError, InvoiceRenderingError
from .elements import ImageElement, PageLayout, RectElement, TextElement
from .settings import LayoutSettings

# Initialize module logger
logger = get_logger(__name__)

GRID_LINE_WIDTH = 0.1 * mm


def _rgb(color) -> tuple:
    return tuple(channel / 255.0 for channel in color)


class DocumentEncoder:
    """
    Encodes pages 1..N into a single PDF document.

    Attributes:
        settings: Document layout settings (page size)
        creator: Value of the PDF Creator field

    Example:
        >>> encoder = DocumentEncoder(LayoutSettings())
        >>> pdf_bytes = encoder.encode(pages, title="Invoice")
    """

    def __init__(self, settings: LayoutSettings, creator: str = "invoice-renderer") -> None:
        self.settings = settings
        self.creator = creator

    def encode(
        self,
        pages: Sequence[PageLayout],
        title: str = "Invoice",
        author: str = "",
        generated_at: Optional[datetime] = None
    ) -> bytes:
        """
        Encode all pages, in order, into PDF bytes.

        Args:
            pages: Laid-out pages; page numbers must run 1..N.
            title: Document title metadata.
            author: Document author metadata.
            generated_at: Optional caller-supplied timestamp, written to
                the subject metadata. Without it no time is embedded.

        Returns:
            The encoded PDF document.

        Raises:
            InvalidImageError: If an image cannot be embedded.
            EncodingFailureError: If the document cannot be assembled.
        """
        if not pages:
            raise EncodingFailureError("no pages to encode", 0)

        numbers = [page.number for page in pages]
        if numbers != list(range(1, len(pages) + 1)):
            raise EncodingFailureError(f"page numbers out of sequence: {numbers}", len(pages))

        buffer = io.BytesIO()
        page_height = self.settings.page_height

        try:
            pdf = canvas.Canvas(
                buffer,
                pagesize=(self.settings.page_width * mm, page_height * mm),
                invariant=1
            )
            pdf.setTitle(title)
            pdf.setAuthor(author)
            pdf.setCreator(self.creator)
            if generated_at is not None:
                pdf.setSubject(f"Generated {generated_at.isoformat()}")

            for page in pages:
                for element in page.elements:
                    self._draw(pdf, element, page_height)
                pdf.showPage()

            pdf.save()
        except InvoiceRenderingError:
            raise
        except Exception as e:
            logger.error(f"PDF encoding failed: {e}")
            raise EncodingFailureError(str(e), len(pages)) from e

        content = buffer.getvalue()
        logger.debug(f"Encoded {len(pages)} page(s), {len(content)} bytes")
        return content

    def _draw(self, pdf: canvas.Canvas, element, page_height: float) -> None:
        if isinstance(element, TextElement):
            self._draw_text(pdf, element, page_height)
        elif isinstance(element, RectElement):
            self._draw_rect(pdf, element, page_height)
        elif isinstance(element, ImageElement):
            self._draw_image(pdf, element, page_height)
        else:
            raise EncodingFailureError(f"unknown element {type(element).__name__}")

    def _draw_text(self, pdf: canvas.Canvas, element: TextElement, page_height: float) -> None:
        pdf.setFont(element.font, element.size)
        pdf.setFillColorRGB(*_rgb(element.color))

        x = element.x * mm
        y = (page_height - element.y) * mm
        if element.align == "right":
            pdf.drawRightString(x, y, element.text)
        else:
            pdf.drawString(x, y, element.text)

    def _draw_rect(self, pdf: canvas.Canvas, element: RectElement, page_height: float) -> None:
        if element.fill is not None:
            pdf.setFillColorRGB(*_rgb(element.fill))
        if element.stroke is not None:
            pdf.setStrokeColorRGB(*_rgb(element.stroke))
            pdf.setLineWidth(GRID_LINE_WIDTH)

        pdf.rect(
            element.x * mm,
            (page_height - element.y - element.height) * mm,
            element.width * mm,
            element.height * mm,
            stroke=1 if element.stroke is not None else 0,
            fill=1 if element.fill is not None else 0
        )

    def _draw_image(self, pdf: canvas.Canvas, element: ImageElement, page_height: float) -> None:
        # Stretched to the box: preserveAspectRatio stays off
        try:
            pdf.drawImage(
                ImageReader(element.image),
                element.x * mm,
                (page_height - element.y - element.height) * mm,
                width=element.width * mm,
                height=element.height * mm,
                mask="auto" if element.image.mode == "RGBA" else None
            )
        except Exception as e:
            logger.error(f"Logo could not be placed: {e}")
            raise InvalidImageError(str(e)) from e
