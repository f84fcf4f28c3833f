"""
Item Table Module.

Lays out the line-item table with explicit pagination.

A cursor (page index, y) walks the rows in order. Before each row the
paginator checks whether the row still fits above the bottom limit; if
not, it starts a new page, repeats the column header at the top of that
page and continues below it. The final cursor tells the caller where
the table ended so the totals line can follow it.

Rows have a fixed height for one line of text. Under the ``wrap``
overflow policy a row grows by one line height per extra wrapped line,
and is capped so that a single row always fits on an empty page.

Author: ML Engineering Team
"""

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from src.invoice_model import LineItem
from src.utils.logger import get_logger
from .elements import PageLayout, RectElement, TextElement
from .settings import LayoutSettings
from .text_fitting import ellipsize, fit_text
from .totals import InvoiceTotals, format_currency, format_quantity

# Initialize module logger
logger = get_logger(__name__)


@dataclass(frozen=True)
class TableGeometry:
    """
    Vertical geometry the paginator works with.

    Attributes:
        first_page_top: Top of the header row on the page the table starts on
        continuation_top: Top of the repeated header row on later pages
        bottom_limit: No row may extend below this y
        header_height: Height of the column header row
        row_height: Height of a one-line body row
    """
    first_page_top: float
    continuation_top: float
    bottom_limit: float
    header_height: float
    row_height: float

    @property
    def usable_height(self) -> float:
        """Space for body rows below the header on a continuation page."""
        return self.bottom_limit - self.continuation_top - self.header_height

    @property
    def rows_per_page(self) -> int:
        """Most one-line rows a continuation page can hold."""
        return math.floor(self.usable_height / self.row_height)


@dataclass
class TableCursor:
    """Current page index (0-based) and write position."""
    page_index: int
    y: float


@dataclass(frozen=True)
class RowPlacement:
    """Where one body row landed."""
    row_index: int
    page_index: int
    top: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height


@dataclass
class TablePage:
    """The part of the table on one page: its header row and body rows."""
    page_index: int
    header_top: float
    rows: List[RowPlacement] = field(default_factory=list)


@dataclass
class TableLayoutResult:
    """
    Outcome of paginating the table.

    Attributes:
        pages: Table fragments in page order
        cursor: Final cursor, just below the last row (or the header)
        header_height: Height of the header row on each fragment
    """
    pages: List[TablePage]
    cursor: TableCursor
    header_height: float

    @property
    def last_table_end_y(self) -> float:
        return self.cursor.y

    @property
    def last_page_index(self) -> int:
        return self.cursor.page_index

    @property
    def row_counts(self) -> List[int]:
        return [len(page.rows) for page in self.pages]

    @property
    def placements(self) -> List[RowPlacement]:
        return [row for page in self.pages for row in page.rows]


class TablePaginator:
    """
    Assigns table rows to pages.

    Example:
        >>> geometry = TableGeometry(0, 0, 110, 10, 10)
        >>> TablePaginator(geometry).paginate([10] * 25).row_counts
        [10, 10, 5]
    """

    def __init__(self, geometry: TableGeometry) -> None:
        self.geometry = geometry

    def paginate(self, row_heights: Sequence[float], start_page_index: int = 0) -> TableLayoutResult:
        """
        Place rows top to bottom, breaking pages on overflow.

        If the header and the first row do not fit below
        ``first_page_top``, the table starts on the next page instead of
        leaving a header without rows behind.

        Args:
            row_heights: Height of each body row, in order.
            start_page_index: Page the table starts on.

        Returns:
            TableLayoutResult with every placement and the final cursor.

        Raises:
            ValueError: If a row is taller than an empty page allows.
        """
        g = self.geometry

        for index, height in enumerate(row_heights):
            if height > g.usable_height:
                raise ValueError(
                    f"Row {index} is {height:.1f}mm tall; a page holds {g.usable_height:.1f}mm"
                )

        header_top = g.first_page_top
        page_index = start_page_index
        first_row = row_heights[0] if row_heights else 0
        if header_top + g.header_height + first_row > g.bottom_limit:
            logger.debug("Table does not fit on its first page; starting on the next one")
            page_index += 1
            header_top = g.continuation_top

        current = TablePage(page_index, header_top)
        pages = [current]
        cursor = TableCursor(page_index, header_top + g.header_height)

        for index, height in enumerate(row_heights):
            if cursor.y + height > g.bottom_limit:
                cursor = TableCursor(cursor.page_index + 1, g.continuation_top + g.header_height)
                current = TablePage(cursor.page_index, g.continuation_top)
                pages.append(current)
                logger.debug(f"Page break before row {index} (page {cursor.page_index + 1})")

            current.rows.append(RowPlacement(index, cursor.page_index, cursor.y, height))
            cursor.y += height

        return TableLayoutResult(pages=pages, cursor=cursor, header_height=g.header_height)


class ItemTable:
    """
    Formats line items into table rows and draws the paginated table.

    Attributes:
        settings: Document layout settings
    """

    def __init__(self, settings: LayoutSettings) -> None:
        self.settings = settings
        s = settings
        # Lines a row may hold and still fit on an empty page
        self.max_lines = 1 + math.floor((s.usable_table_height - s.row_height) / s.line_height)

    def header_row(self) -> List[str]:
        return [column.title for column in self.settings.columns]

    def build_rows(self, items: Sequence[LineItem], totals: InvoiceTotals) -> List[List[str]]:
        """
        Format items as ``[description, price, qty, line total]`` rows.

        Args:
            items: Line items in invoice order.
            totals: Totals computed from the same items.
        """
        s = self.settings
        return [
            [
                item.description,
                format_currency(item.price, s.currency_prefix, s.currency_decimals),
                format_quantity(item.qty),
                format_currency(item_total, s.currency_prefix, s.currency_decimals),
            ]
            for item, item_total in zip(items, totals.line_totals)
        ]

    def fit_row(self, cells: Sequence[str]) -> Tuple[List[List[str]], float]:
        """
        Fit every cell into its column.

        Returns:
            Lines per cell and the resulting row height.
        """
        s = self.settings
        fitted = [
            fit_text(text, column.width - 2 * s.cell_padding, s.font_regular,
                     s.table_font_size, s.overflow, self.max_lines)
            for text, column in zip(cells, s.columns)
        ]
        line_count = max(len(lines) for lines in fitted)
        return fitted, s.row_height + (line_count - 1) * s.line_height

    def geometry(self, start_y: float) -> TableGeometry:
        s = self.settings
        return TableGeometry(
            first_page_top=start_y,
            continuation_top=s.continuation_top,
            bottom_limit=s.content_bottom,
            header_height=s.header_height,
            row_height=s.row_height,
        )

    def layout(self, pages: List[PageLayout], rows: Sequence[Sequence[str]], start_y: float) -> TableLayoutResult:
        """
        Paginate and draw the table, appending pages as needed.

        Args:
            pages: Document pages so far; the table starts on the last one.
            rows: Formatted rows from ``build_rows``.
            start_y: Top of the header row on the starting page.

        Returns:
            TableLayoutResult describing where every row went.
        """
        fitted = [self.fit_row(row) for row in rows]
        result = TablePaginator(self.geometry(start_y)).paginate(
            [height for _, height in fitted],
            start_page_index=len(pages) - 1
        )

        for table_page in result.pages:
            while len(pages) <= table_page.page_index:
                pages.append(PageLayout(len(pages) + 1))
            page = pages[table_page.page_index]

            self._draw_header(page, table_page.header_top)
            for placement in table_page.rows:
                lines, _ = fitted[placement.row_index]
                self._draw_row(page, placement, lines)

        logger.debug(
            f"Table laid out: {len(rows)} rows over {len(result.pages)} page(s), "
            f"rows per page {result.row_counts}"
        )
        return result

    def _column_edges(self) -> List[float]:
        x = self.settings.content_left
        edges = []
        for column in self.settings.columns:
            edges.append(x)
            x += column.width
        return edges

    def _text_x(self, left: float, width: float, align: str) -> float:
        pad = self.settings.cell_padding
        return left + width - pad if align == "right" else left + pad

    def _draw_header(self, page: PageLayout, top: float) -> None:
        s = self.settings
        baseline = top + (s.header_height - s.line_height) / 2 + s.line_height * 0.75

        for left, column in zip(self._column_edges(), s.columns):
            page.add(RectElement(left, top, column.width, s.header_height,
                                 fill=s.header_fill, stroke=s.grid_color, role="header"))
            title = ellipsize(column.title, column.width - 2 * s.cell_padding, s.font_bold, s.table_font_size)
            page.add(TextElement(title, self._text_x(left, column.width, column.align), baseline,
                                 s.font_bold, s.table_font_size, align=column.align,
                                 color=s.header_text_color, role="header"))

    def _draw_row(self, page: PageLayout, placement: RowPlacement, lines: List[List[str]]) -> None:
        s = self.settings
        first_baseline = placement.top + (s.row_height - s.line_height) / 2 + s.line_height * 0.75

        for left, column, cell_lines in zip(self._column_edges(), s.columns, lines):
            page.add(RectElement(left, placement.top, column.width, placement.height,
                                 stroke=s.grid_color, role="cell"))
            for number, line in enumerate(cell_lines):
                if not line:
                    continue
                page.add(TextElement(line, self._text_x(left, column.width, column.align),
                                     first_baseline + number * s.line_height,
                                     s.font_regular, s.table_font_size, align=column.align, role="cell"))
