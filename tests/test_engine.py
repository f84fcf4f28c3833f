"""End-to-end tests: render invoices and read the PDF back."""

from datetime import date, datetime
from decimal import Decimal

import pytest
from reportlab.lib.units import mm

from src.invoice_model import Invoice, LineItem
from src.renderer import InvoiceRenderer, LayoutSettings
from src.utils.exceptions import ConfigurationError, InvalidImageError

from .conftest import make_items, png_bytes, read_pdf


def test_render_returns_pdf_bytes(renderer, invoice):
    document = renderer.render(invoice)

    assert document.content.startswith(b"%PDF")
    assert document.page_count == 1
    assert document.filename == "invoice.pdf"
    assert document.grand_total == Decimal("345.50")


def test_pdf_contains_all_sections(renderer, invoice):
    ((text, _, images),) = read_pdf(renderer.render(invoice).content)

    for expected in ("INVOICE", "Bill From:", "Business Name: ABC Corp", "Bill To:",
                     "Recipient Name: Client LLC", "Description", "Consulting",
                     "Rs.150.00", "Rs.300.00", "Rs.45.50", "Total: Rs.345.50",
                     "Thank you for your business!", "Powered by Techverse Digital Solution",
                     "Page 1 of 1"):
        assert expected in text
    assert images == []


def test_render_is_deterministic(settings, invoice, logo_png):
    invoice = Invoice(**{**invoice.__dict__, "logo": logo_png})

    first = InvoiceRenderer(settings).render(invoice).content
    second = InvoiceRenderer(settings).render(invoice).content

    assert first == second


def test_supplied_timestamp_only_changes_metadata(renderer, invoice):
    plain = renderer.render(invoice).content
    stamped = renderer.render(invoice, generated_at=datetime(2026, 1, 15, 9, 30)).content

    assert plain != stamped
    assert b"2026-01-15T09:30:00" in stamped
    assert renderer.render(invoice, generated_at=datetime(2026, 1, 15, 9, 30)).content == stamped


def test_render_accepts_form_mapping(renderer):
    document = renderer.render({
        "businessName": "ABC Corp",
        "items": [{"description": "Widget", "price": 2.5, "qty": 4}],
        "totalAmount": 1,
    })
    assert document.grand_total == Decimal("10")


def test_supplied_total_is_ignored(renderer):
    invoice = Invoice(items=make_items(3), total_amount=Decimal("999"))
    document = renderer.render(invoice)
    ((text, _, _),) = read_pdf(document.content)

    assert document.grand_total == Decimal("30")
    assert "Total: Rs.30.00" in text
    assert "999" not in text


def test_empty_items(renderer):
    document = renderer.render(Invoice(business_name="ABC Corp"))
    ((text, _, _),) = read_pdf(document.content)

    assert document.page_count == 1
    assert document.table.row_counts == [0]
    assert "Description" in text
    assert "Total: Rs.0.00" in text
    assert document.pages[0].texts("cell") == []


def test_overflow_scenario_three_pages():
    settings = LayoutSettings(margin_top=160, table_start_y=160, header_height=10,
                              row_height=10, content_bottom=270)
    assert settings.usable_table_height == 100

    document = InvoiceRenderer(settings).render(Invoice(items=make_items(25)))
    pages = read_pdf(document.content)

    assert document.page_count == 3
    assert document.table.row_counts == [10, 10, 5]
    assert len(pages) == 3
    for text, _, _ in pages:
        assert "Description" in text


def test_many_items_paginate_with_repeated_header(renderer):
    items = make_items(70)
    document = renderer.render(Invoice(items=items))
    pages = read_pdf(document.content)

    assert document.table.row_counts == [21, 30, 19]
    assert len(pages) == document.page_count == 3

    seen = []
    for text, words, _ in pages:
        assert "Description" in text
        header_top = min(w["top"] for w in words if w["text"] == "Description")
        item_tops = [w["top"] for w in words if w["text"] == "Item"]
        assert all(top > header_top for top in item_tops)
        seen.extend(
            int(words[i + 1]["text"]) for i, w in enumerate(words[:-1])
            if w["text"] == "Item"
        )
    assert seen == list(range(1, 71))


def test_footer_on_every_page(renderer):
    document = renderer.render(Invoice(items=make_items(70)))

    for number, (text, _, _) in enumerate(read_pdf(document.content), start=1):
        assert "Thank you for your business!" in text
        assert "Powered by Techverse Digital Solution" in text
        assert f"Page {number} of 3" in text


def test_totals_follow_table_on_same_page(renderer, settings):
    document = renderer.render(Invoice(items=make_items(20)))

    page_index, y = document.totals_position
    assert document.page_count == 1
    assert page_index == document.table.last_page_index
    assert y == document.table.last_table_end_y + settings.totals_offset
    assert y > document.table.placements[-1].bottom


def test_totals_start_new_page_when_table_fills_page(renderer, settings):
    document = renderer.render(Invoice(items=make_items(21)))
    pages = read_pdf(document.content)

    assert document.table.row_counts == [21]
    assert document.page_count == 2
    assert document.totals_position == (1, settings.continuation_top + settings.totals_offset)
    assert "Total: Rs.210.00" in pages[1][0]
    assert "Total:" not in pages[0][0]
    assert "Description" not in pages[1][0]


def test_totals_never_below_content_bottom(renderer, settings):
    for count in range(15, 60):
        document = renderer.render(Invoice(items=make_items(count)))
        page_index, y = document.totals_position
        assert y <= settings.content_bottom
        if page_index == document.table.last_page_index:
            assert y > document.table.last_table_end_y


def test_logo_is_embedded_in_fixed_box(renderer, invoice):
    invoice = Invoice(**{**invoice.__dict__, "logo": png_bytes(size=(300, 300))})
    ((_, _, images),) = read_pdf(renderer.render(invoice).content)

    (image,) = images
    assert image["x0"] == pytest.approx(10 * mm, abs=0.5)
    assert image["top"] == pytest.approx(10 * mm, abs=0.5)
    assert image["width"] == pytest.approx(50 * mm, abs=0.5)
    assert image["height"] == pytest.approx(20 * mm, abs=0.5)


def test_transparent_logo_renders(renderer):
    logo = png_bytes(mode="RGBA", color=(10, 20, 30, 128))
    document = renderer.render(Invoice(logo=logo))
    assert len(document.pages[0].images) == 1


def test_invalid_logo_aborts_render(renderer, invoice):
    broken = Invoice(**{**invoice.__dict__, "logo": b"not an image at all"})
    with pytest.raises(InvalidImageError):
        renderer.render(broken)


def test_renderer_keeps_no_state_between_renders(renderer):
    big = renderer.render(Invoice(items=make_items(70)))
    small = renderer.render(Invoice(items=make_items(1)))

    assert big.page_count == 3
    assert small.page_count == 1
    assert small.content == InvoiceRenderer(LayoutSettings()).render(Invoice(items=make_items(1))).content


def test_negative_quantity_rendered_literally(renderer):
    invoice = Invoice(items=(LineItem("Refund", Decimal("25"), Decimal("-2")),))
    document = renderer.render(invoice)
    ((text, _, _),) = read_pdf(document.content)

    assert "Rs.-50.00" in text
    assert document.grand_total == Decimal("-50")


def test_invalid_settings_rejected():
    with pytest.raises(ConfigurationError):
        InvoiceRenderer(LayoutSettings(overflow="shrink"))


def test_to_dict_summary(renderer, invoice):
    summary = renderer.render(invoice).to_dict()
    assert summary["page_count"] == 1
    assert summary["rows_per_page"] == [2]
    assert summary["grand_total"] == "345.50"


def test_long_party_block_stays_on_page_and_table_follows(renderer, settings):
    address = "\n".join(f"Line {n}" for n in range(1, 61))
    document = renderer.render(Invoice(business_address=address, items=make_items(3)))

    first_page = document.pages[0]
    assert max(t.y for t in first_page.texts("bill_from")) <= settings.content_bottom
    assert document.table.pages[0].page_index == 1
    assert document.table.row_counts == [3]
    assert document.page_count == 2


def test_very_large_price_renders(renderer):
    invoice = Invoice(items=(LineItem("Asset", Decimal("1E+26"), Decimal("1")),))
    document = renderer.render(invoice)
    ((text, _, _),) = read_pdf(document.content)

    assert document.grand_total == Decimal("1E+26")
    assert "Total: Rs.100000000000000000000000000.00" in text


def test_form_without_date_is_stamped_with_today(renderer, settings):
    document = renderer.render({"businessName": "ABC Corp"})

    (date_line,) = document.pages[0].texts("date")
    assert date_line.text == f"{settings.date_label} {date.today().strftime('%d/%m/%Y')}"


def test_form_with_date_renders_identically(renderer):
    form = {"businessName": "ABC Corp", "date": "15/01/2026",
            "items": [{"description": "Widget", "price": "2.50", "qty": 4}]}

    assert renderer.render(form).content == renderer.render(dict(form)).content
