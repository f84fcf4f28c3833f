"""Tests for the header, logo and party layout."""

import pytest

from src.invoice_model import Invoice
from src.renderer.elements import PageLayout
from src.renderer.header import HeaderLayout, decode_logo_image
from src.renderer.text_fitting import ELLIPSIS
from src.utils.exceptions import InvalidImageError

from .conftest import png_bytes


def positions(page, role):
    return [(t.text, t.x, t.y) for t in page.texts(role)]


def test_logo_is_stretched_into_fixed_box(settings):
    page = PageLayout(1)
    logo = decode_logo_image(png_bytes(size=(100, 100)))

    HeaderLayout(settings).layout(page, Invoice(), logo)

    (image,) = page.images
    assert (image.x, image.y) == (settings.logo_x, settings.logo_y)
    assert (image.width, image.height) == (settings.logo_width, settings.logo_height)
    assert image.width / image.height != logo.width / logo.height


def test_missing_logo_leaves_other_elements_in_place(settings, invoice):
    with_logo, without_logo = PageLayout(1), PageLayout(1)
    header = HeaderLayout(settings)

    header.layout(with_logo, invoice, decode_logo_image(png_bytes()))
    header.layout(without_logo, invoice, None)

    assert without_logo.images == []
    assert positions(without_logo, None) == positions(with_logo, None)


def test_title_is_right_aligned(settings):
    page = PageLayout(1)
    HeaderLayout(settings).layout(page, Invoice(), None)

    (title,) = page.texts("title")
    assert title.text == "INVOICE"
    assert title.align == "right"
    assert (title.x, title.y) == (settings.content_right, settings.title_y)


def test_party_blocks_at_fixed_anchors(settings, invoice):
    page = PageLayout(1)
    HeaderLayout(settings).layout(page, invoice, None)

    assert positions(page, "bill_from") == [
        ("Bill From:", 10, 40),
        ("Business Name: ABC Corp", 10, 45),
        ("Business Address: 12 Market Road", 10, 50),
        ("Pune", 10, 55),
    ]
    assert positions(page, "bill_to") == [
        ("Bill To:", 100, 40),
        ("Recipient Name: Client LLC", 100, 45),
        ("Recipient Address: 5 Lake View", 100, 50),
    ]


def test_empty_fields_render_blank_values(settings):
    page = PageLayout(1)
    bottom = HeaderLayout(settings).layout(page, Invoice(date=""), None)

    assert [t.text for t in page.texts("bill_to")] == ["Bill To:", "Recipient Name:", "Recipient Address:"]
    assert page.texts("date") == []
    assert bottom == 50


def test_date_is_rendered_under_title(settings, invoice):
    page = PageLayout(1)
    HeaderLayout(settings).layout(page, invoice, None)

    (date_line,) = page.texts("date")
    assert date_line.text == "Date: 15/01/2026"
    assert date_line.y > settings.title_y


def test_table_starts_at_fixed_offset_for_normal_parties(settings, invoice):
    header = HeaderLayout(settings)
    bottom = header.layout(PageLayout(1), invoice, None)

    assert header.table_start(bottom) == settings.table_start_y


def test_table_moves_below_tall_party_block(settings):
    address = "\n".join(f"Line {n}" for n in range(1, 13))
    header = HeaderLayout(settings)
    bottom = header.layout(PageLayout(1), Invoice(business_address=address), None)

    assert bottom == 40 + 13 * 5
    assert header.table_start(bottom) == bottom + settings.table_party_gap


def test_palette_logo_is_converted():
    image = decode_logo_image(png_bytes(mode="P", color=3))
    assert image.mode in ("RGB", "RGBA")


@pytest.mark.parametrize("data", [b"not an image", png_bytes()[:40]])
def test_undecodable_logo_raises(data):
    with pytest.raises(InvalidImageError) as exc_info:
        decode_logo_image(data)
    assert exc_info.value.details["size"] == len(data)


def test_long_party_block_is_capped_at_content_bottom(settings):
    address = "\n".join(f"Line {n}" for n in range(1, 61))
    page = PageLayout(1)
    bottom = HeaderLayout(settings).layout(page, Invoice(business_address=address), None)

    lines = page.texts("bill_from")
    assert max(t.y for t in lines) <= settings.content_bottom
    assert bottom == max(t.y for t in lines)
    assert len(lines) == HeaderLayout(settings).max_party_lines()
    assert lines[-1].text.endswith(ELLIPSIS)
    assert [t.text for t in page.texts("bill_to")] == ["Bill To:", "Recipient Name:", "Recipient Address:"]


def test_party_block_that_fits_exactly_is_not_marked(settings):
    header = HeaderLayout(settings)
    # heading and name take two lines
    address = "\n".join(f"Line {n}" for n in range(1, header.max_party_lines() - 1))
    page = PageLayout(1)
    header.layout(page, Invoice(business_address=address), None)

    lines = page.texts("bill_from")
    assert len(lines) == header.max_party_lines()
    assert not lines[-1].text.endswith(ELLIPSIS)
