"""Shared fixtures for the invoice renderer tests."""

import io
from decimal import Decimal

import pdfplumber
import pytest
from PIL import Image

from src.invoice_model import Invoice, LineItem
from src.renderer import InvoiceRenderer, LayoutSettings


def make_items(count, price="10.00", qty=1):
    return tuple(
        LineItem(description=f"Item {n}", price=Decimal(price), qty=qty)
        for n in range(1, count + 1)
    )


def png_bytes(size=(120, 40), color=(200, 30, 30), mode="RGB"):
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def read_pdf(content):
    """Pages of a rendered PDF as (text, words, images) tuples."""
    with pdfplumber.open(io.BytesIO(content)) as pdf:
        return [
            (page.extract_text() or "", page.extract_words(), page.images)
            for page in pdf.pages
        ]


@pytest.fixture
def settings():
    return LayoutSettings()


@pytest.fixture
def renderer(settings):
    return InvoiceRenderer(settings)


@pytest.fixture
def logo_png():
    return png_bytes()


@pytest.fixture
def invoice():
    return Invoice(
        business_name="ABC Corp",
        business_address="12 Market Road\nPune",
        recipient_name="Client LLC",
        recipient_address="5 Lake View",
        items=(
            LineItem("Consulting", Decimal("150.00"), Decimal("2")),
            LineItem("Travel", Decimal("45.50"), Decimal("1")),
        ),
        date="15/01/2026",
    )
