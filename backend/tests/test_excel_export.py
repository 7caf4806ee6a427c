"""
Tests for the top-products Excel export.
"""
import io

import openpyxl

from app.schemas.dashboard import TopProduct
from app.services.excel_export import HEADERS, build_top_products_workbook


def load(buffer: bytes):
    return openpyxl.load_workbook(io.BytesIO(buffer)).active


def test_header_and_rows():
    products = [
        TopProduct(name="Cake", price=20.0, category="Food", quantity=4, amount=80.0),
        TopProduct(name="Coffee", price=10.0, category="Drinks", quantity=2, amount=20.0),
    ]

    ws = load(build_top_products_workbook(products))

    assert ws.title == "Top Products"
    assert tuple(cell.value for cell in ws[1]) == HEADERS
    assert [cell.value for cell in ws[2]] == [1, "Cake", "Food", 20.0, 4, 80.0]
    assert [cell.value for cell in ws[3]] == [2, "Coffee", "Drinks", 10.0, 2, 20.0]
    assert ws.max_row == 3


def test_header_row_is_frozen_and_bold():
    products = [TopProduct(name="Tea", price=5.0, category="Drinks", quantity=1, amount=5.0)]

    ws = load(build_top_products_workbook(products))

    assert ws.freeze_panes == "A2"
    assert ws["A1"].font.bold
    assert ws["D2"].number_format == "#,##0.00"
