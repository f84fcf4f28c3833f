"""
Invoice Renderer Module.

This module provides the InvoiceRenderer class that runs one render
pass: snapshot → totals → header → paginated table → totals line →
footers → PDF bytes.

The renderer only keeps configuration. Pages, cursors and totals live
inside a single ``render`` call, so one renderer can be reused for any
number of invoices.

Footer policy: the thank-you line, the attribution line and the page
marker are drawn on every page. The table's bottom limit sits above
them, so rows never collide with a footer.

Author: ML Engineering Team
"""

import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from config import get_config
from src.invoice_model import Invoice
from src.utils.logger import get_logger
from .elements import PageLayout, TextElement
from .encoder import DocumentEncoder
from .header import HeaderLayout, decode_logo_image
from .settings import LayoutSettings
from .table import ItemTable, TableLayoutResult
from .totals import InvoiceTotals, compute_totals, format_currency

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderedDocument:
    """
    Result of one render call.

    Attributes:
        content: Encoded PDF bytes
        pages: Laid-out pages, in order
        table: Pagination result for the item table
        totals: Line totals and grand total
        totals_position: (page index, baseline y) of the totals line
        filename: Default filename for saving
        render_time: Seconds spent rendering
    """
    content: bytes
    pages: Tuple[PageLayout, ...]
    table: TableLayoutResult
    totals: InvoiceTotals
    totals_position: Tuple[int, float]
    filename: str = "invoice.pdf"
    render_time: float = 0.0

    @property
    def page_count(self) -> int:
        return len(self.pages)

    @property
    def grand_total(self) -> Decimal:
        return self.totals.grand_total

    def to_dict(self) -> Dict[str, Any]:
        """Summary of the render, without the document bytes."""
        return {
            'filename': self.filename,
            'page_count': self.page_count,
            'size_bytes': len(self.content),
            'rows_per_page': self.table.row_counts,
            'grand_total': str(self.grand_total),
            'render_time': self.render_time,
        }

    def __repr__(self) -> str:
        return (
            f"RenderedDocument("
            f"pages={self.page_count}, "
            f"bytes={len(self.content)}, "
            f"total={self.grand_total})"
        )


class InvoiceRenderer:
    """
    Renders invoice snapshots into paginated PDF documents.

    Attributes:
        settings: Document layout settings
        filename: Default filename attached to results
        header: Header and party layout stage
        table: Item table stage
        encoder: PDF encoder

    Example:
        >>> renderer = InvoiceRenderer()
        >>> document = renderer.render(invoice)
        >>> print(f"{document.page_count} page(s), total {document.grand_total}")
    """

    def __init__(self, settings: Optional[LayoutSettings] = None, filename: Optional[str] = None) -> None:
        """
        Initialize the renderer.

        Args:
            settings: Layout settings; read from configuration when None.
            filename: Default output filename; ``output.filename`` when None.

        Raises:
            ConfigurationError: If the settings describe an impossible layout.
        """
        self.settings = settings if settings is not None else LayoutSettings.from_config()
        self.settings.validate()
        self.filename = filename or get_config("output.filename", "invoice.pdf")

        self.header = HeaderLayout(self.settings)
        self.table = ItemTable(self.settings)
        self.encoder = DocumentEncoder(self.settings)

        logger.debug(
            f"InvoiceRenderer initialized (page={self.settings.page_width}x{self.settings.page_height}mm, "
            f"overflow={self.settings.overflow})"
        )

    def render(
        self,
        invoice: Union[Invoice, Mapping[str, Any]],
        generated_at: Optional[datetime] = None
    ) -> RenderedDocument:
        """
        Render one invoice.

        Identical snapshots give identical bytes. Form data without a
        ``date`` is stamped with today's date when converted, so pass the
        date explicitly (or an ``Invoice``) when output must not change
        from one day to the next.

        Args:
            invoice: Snapshot, or form data convertible to one.
            generated_at: Optional timestamp stored in the PDF metadata.

        Returns:
            RenderedDocument with the PDF bytes and layout details.

        Raises:
            InvoiceDataError: If form data cannot become a snapshot.
            InvalidImageError: If the logo cannot be decoded or placed.
            EncodingFailureError: If the PDF cannot be assembled.
        """
        start_time = time.time()
        snapshot = Invoice.coerce(invoice)

        totals = compute_totals(snapshot.items)
        logo = decode_logo_image(snapshot.logo) if snapshot.has_logo else None

        pages: List[PageLayout] = [PageLayout(1)]
        party_bottom = self.header.layout(pages[0], snapshot, logo)
        start_y = self.header.table_start(party_bottom)

        rows = self.table.build_rows(snapshot.items, totals)
        table = self.table.layout(pages, rows, start_y)

        totals_position = self._place_totals(pages, table, totals)
        self._add_footers(pages)

        content = self.encoder.encode(
            pages,
            title=f"{self.settings.title_text.title()} {snapshot.date}".strip(),
            author=snapshot.business_name,
            generated_at=generated_at
        )

        document = RenderedDocument(
            content=content,
            pages=tuple(pages),
            table=table,
            totals=totals,
            totals_position=totals_position,
            filename=self.filename,
            render_time=time.time() - start_time
        )

        logger.info(
            f"Rendered invoice: {len(snapshot.items)} item(s), {document.page_count} page(s), "
            f"total {format_currency(totals.grand_total, self.settings.currency_prefix, self.settings.currency_decimals)}"
        )
        return document

    def _place_totals(self, pages: List[PageLayout], table: TableLayoutResult, totals: InvoiceTotals) -> Tuple[int, float]:
        """
        Write the grand total under the table.

        The line goes ``totals_offset`` below the table on the table's
        last page; if that passes the bottom limit, a new page is
        started and the line goes near its top instead.
        """
        s = self.settings
        page_index = table.last_page_index
        y = table.last_table_end_y + s.totals_offset

        if y > s.content_bottom:
            page_index += 1
            y = s.continuation_top + s.totals_offset
            logger.debug(f"Totals line does not fit under the table; moved to page {page_index + 1}")

        while len(pages) <= page_index:
            pages.append(PageLayout(len(pages) + 1))

        amount = format_currency(totals.grand_total, s.currency_prefix, s.currency_decimals)
        pages[page_index].add(TextElement(
            f"{s.totals_label} {amount}", s.content_right, y,
            s.font_bold, s.totals_font_size, align="right", role="totals"
        ))
        return page_index, y

    def _add_footers(self, pages: List[PageLayout]) -> None:
        s = self.settings
        page_total = len(pages)

        for page in pages:
            page.add(TextElement(
                s.thank_you_text, s.content_left, s.thank_you_y,
                s.font_regular, s.thank_you_font_size, role="footer"
            ))
            page.add(TextElement(
                s.attribution_text, s.content_left, s.attribution_y,
                s.font_regular, s.attribution_font_size, role="footer"
            ))
            if s.page_numbers:
                page.add(TextElement(
                    s.page_number_format.format(page=page.number, pages=page_total),
                    s.content_right, s.attribution_y,
                    s.font_regular, s.attribution_font_size, align="right", role="page_number"
                ))
