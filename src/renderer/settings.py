"""
Layout Settings Module.

Collects every layout constant of the invoice document from the YAML
configuration into one immutable object, so a render never reads
configuration midway.

All lengths are millimetres; the origin is the top-left page corner and
y grows downwards.

Author: ML Engineering Team
"""

from dataclasses import dataclass, field
from typing import Tuple

from reportlab.pdfbase import pdfmetrics

from config import get_config
from src.utils.exceptions import ConfigurationError

OVERFLOW_POLICIES = ("wrap", "ellipsis")
ALIGNMENTS = ("left", "right")

Color = Tuple[int, int, int]


@dataclass(frozen=True)
class TableColumn:
    """One table column: header title, width in mm and text alignment."""
    title: str
    width: float
    align: str = "left"


DEFAULT_COLUMNS = (
    TableColumn("Description", 100, "left"),
    TableColumn("Price", 32, "right"),
    TableColumn("Quantity", 26, "right"),
    TableColumn("Total", 32, "right"),
)


@dataclass(frozen=True)
class LayoutSettings:
    """
    Geometry, typography and fixed texts of the invoice document.

    Construct directly for tests, or with ``from_config()`` to read
    ``document.*`` from settings.yaml.
    """
    # Page
    page_width: float = 210
    page_height: float = 297
    margin_left: float = 10
    margin_right: float = 10
    margin_top: float = 15
    content_bottom: float = 270

    # Fonts
    font_regular: str = "Helvetica"
    font_bold: str = "Helvetica-Bold"

    # Header
    logo_x: float = 10
    logo_y: float = 10
    logo_width: float = 50
    logo_height: float = 20
    title_text: str = "INVOICE"
    title_font_size: float = 24
    title_y: float = 15
    date_label: str = "Date:"
    date_font_size: float = 10
    date_y: float = 22

    # Party blocks
    party_y: float = 40
    party_line_spacing: float = 5
    party_font_size: float = 12
    party_column_width: float = 85
    bill_from_x: float = 10
    bill_from_heading: str = "Bill From:"
    bill_from_name_label: str = "Business Name:"
    bill_from_address_label: str = "Business Address:"
    bill_to_x: float = 100
    bill_to_heading: str = "Bill To:"
    bill_to_name_label: str = "Recipient Name:"
    bill_to_address_label: str = "Recipient Address:"

    # Table
    table_start_y: float = 90
    table_party_gap: float = 10
    header_height: float = 8
    row_height: float = 8
    line_height: float = 5
    cell_padding: float = 2
    table_font_size: float = 12
    overflow: str = "wrap"
    header_fill: Color = (22, 160, 133)
    header_text_color: Color = (255, 255, 255)
    grid_color: Color = (200, 200, 200)
    columns: Tuple[TableColumn, ...] = field(default_factory=lambda: DEFAULT_COLUMNS)

    # Totals
    totals_label: str = "Total:"
    totals_offset: float = 10
    totals_font_size: float = 12
    currency_prefix: str = "Rs."
    currency_decimals: int = 2

    # Footer
    thank_you_text: str = "Thank you for your business!"
    thank_you_y: float = 280
    thank_you_font_size: float = 12
    attribution_text: str = "Powered by Techverse Digital Solution"
    attribution_y: float = 290
    attribution_font_size: float = 8
    page_numbers: bool = True
    page_number_format: str = "Page {page} of {pages}"

    @property
    def content_left(self) -> float:
        return self.margin_left

    @property
    def content_right(self) -> float:
        return self.page_width - self.margin_right

    @property
    def table_width(self) -> float:
        return sum(column.width for column in self.columns)

    @property
    def continuation_top(self) -> float:
        """Top of the repeated header row on pages after the first."""
        return self.margin_top

    @property
    def usable_table_height(self) -> float:
        """Vertical space for body rows below the header on a continuation page."""
        return self.content_bottom - self.continuation_top - self.header_height

    @classmethod
    def from_config(cls) -> 'LayoutSettings':
        """
        Build settings from the ``document`` section of the configuration.

        Missing keys keep the class defaults.
        """
        d = cls()
        columns = get_config("document.table.columns")
        if columns:
            columns = tuple(
                TableColumn(str(c.get('title', "")), float(c.get('width', 0)), str(c.get('align', "left")))
                for c in columns
            )
        else:
            columns = d.columns

        settings = cls(
            page_width=get_config("document.page.width", d.page_width),
            page_height=get_config("document.page.height", d.page_height),
            margin_left=get_config("document.page.margin_left", d.margin_left),
            margin_right=get_config("document.page.margin_right", d.margin_right),
            margin_top=get_config("document.page.margin_top", d.margin_top),
            content_bottom=get_config("document.page.content_bottom", d.content_bottom),
            font_regular=get_config("document.fonts.regular", d.font_regular),
            font_bold=get_config("document.fonts.bold", d.font_bold),
            logo_x=get_config("document.logo.x", d.logo_x),
            logo_y=get_config("document.logo.y", d.logo_y),
            logo_width=get_config("document.logo.width", d.logo_width),
            logo_height=get_config("document.logo.height", d.logo_height),
            title_text=get_config("document.title.text", d.title_text),
            title_font_size=get_config("document.title.font_size", d.title_font_size),
            title_y=get_config("document.title.y", d.title_y),
            date_label=get_config("document.date.label", d.date_label),
            date_font_size=get_config("document.date.font_size", d.date_font_size),
            date_y=get_config("document.date.y", d.date_y),
            party_y=get_config("document.parties.y", d.party_y),
            party_line_spacing=get_config("document.parties.line_spacing", d.party_line_spacing),
            party_font_size=get_config("document.parties.font_size", d.party_font_size),
            party_column_width=get_config("document.parties.column_width", d.party_column_width),
            bill_from_x=get_config("document.parties.bill_from.x", d.bill_from_x),
            bill_from_heading=get_config("document.parties.bill_from.heading", d.bill_from_heading),
            bill_from_name_label=get_config("document.parties.bill_from.name_label", d.bill_from_name_label),
            bill_from_address_label=get_config("document.parties.bill_from.address_label", d.bill_from_address_label),
            bill_to_x=get_config("document.parties.bill_to.x", d.bill_to_x),
            bill_to_heading=get_config("document.parties.bill_to.heading", d.bill_to_heading),
            bill_to_name_label=get_config("document.parties.bill_to.name_label", d.bill_to_name_label),
            bill_to_address_label=get_config("document.parties.bill_to.address_label", d.bill_to_address_label),
            table_start_y=get_config("document.table.start_y", d.table_start_y),
            table_party_gap=get_config("document.table.party_gap", d.table_party_gap),
            header_height=get_config("document.table.header_height", d.header_height),
            row_height=get_config("document.table.row_height", d.row_height),
            line_height=get_config("document.table.line_height", d.line_height),
            cell_padding=get_config("document.table.cell_padding", d.cell_padding),
            table_font_size=get_config("document.table.font_size", d.table_font_size),
            overflow=get_config("document.table.overflow", d.overflow),
            header_fill=tuple(get_config("document.table.header_fill", d.header_fill)),
            header_text_color=tuple(get_config("document.table.header_text_color", d.header_text_color)),
            grid_color=tuple(get_config("document.table.grid_color", d.grid_color)),
            columns=columns,
            totals_label=get_config("document.totals.label", d.totals_label),
            totals_offset=get_config("document.totals.offset", d.totals_offset),
            totals_font_size=get_config("document.totals.font_size", d.totals_font_size),
            currency_prefix=get_config("document.currency.prefix", d.currency_prefix),
            currency_decimals=get_config("document.currency.decimals", d.currency_decimals),
            thank_you_text=get_config("document.footer.thank_you.text", d.thank_you_text),
            thank_you_y=get_config("document.footer.thank_you.y", d.thank_you_y),
            thank_you_font_size=get_config("document.footer.thank_you.font_size", d.thank_you_font_size),
            attribution_text=get_config("document.footer.attribution.text", d.attribution_text),
            attribution_y=get_config("document.footer.attribution.y", d.attribution_y),
            attribution_font_size=get_config("document.footer.attribution.font_size", d.attribution_font_size),
            page_numbers=get_config("document.footer.page_numbers.enabled", d.page_numbers),
            page_number_format=get_config("document.footer.page_numbers.format", d.page_number_format),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """
        Check that the geometry can hold at least one table row per page.

        Raises:
            ConfigurationError: On an impossible or unknown setting.
        """
        if self.overflow not in OVERFLOW_POLICIES:
            raise ConfigurationError("table.overflow", self.overflow, f"expected one of {OVERFLOW_POLICIES}")

        for name in ('row_height', 'header_height', 'line_height', 'party_line_spacing', 'page_width', 'page_height'):
            if getattr(self, name) <= 0:
                raise ConfigurationError(name, getattr(self, name), "must be positive")

        if not self.columns:
            raise ConfigurationError("table.columns", [], "at least one column is required")
        for column in self.columns:
            if column.width <= 2 * self.cell_padding:
                raise ConfigurationError("table.columns", column.title, "column narrower than its padding")
            if column.align not in ALIGNMENTS:
                raise ConfigurationError("table.columns", column.align, f"expected one of {ALIGNMENTS}")

        for setting, font in (('fonts.regular', self.font_regular), ('fonts.bold', self.font_bold)):
            try:
                pdfmetrics.getFont(font)
            except (KeyError, pdfmetrics.FontError, pdfmetrics.FontNotFoundError) as e:
                raise ConfigurationError(setting, font, f"unknown font: {e}") from e

        if self.content_bottom > self.page_height:
            raise ConfigurationError("page.content_bottom", self.content_bottom, "below the page edge")
        if self.party_y > self.content_bottom:
            raise ConfigurationError("parties.y", self.party_y, "below the content bottom")

        if self.continuation_top + self.header_height + self.row_height > self.content_bottom:
            raise ConfigurationError(
                "table.row_height", self.row_height,
                "a header and one row do not fit on a continuation page"
            )
        if self.table_start_y + self.header_height + self.row_height > self.content_bottom:
            raise ConfigurationError(
                "table.start_y", self.table_start_y,
                "a header and one row do not fit on the first page"
            )
