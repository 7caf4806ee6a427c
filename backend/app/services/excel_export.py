"""
Excel export of the top-products ranking.
"""
import io
from collections.abc import Sequence

import openpyxl
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from app.schemas.dashboard import TopProduct

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
TOP_PRODUCTS_FILENAME = "top_products.xlsx"

HEADERS = ("#", "Product", "Category", "Price", "Quantity", "Amount")
MONEY_FORMAT = "#,##0.00"


def build_top_products_workbook(products: Sequence[TopProduct]) -> bytes:
    """Serialize ranked products to an .xlsx file and return its bytes."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Top Products"

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
    center_alignment = Alignment(horizontal="center", vertical="center")

    for col, header in enumerate(HEADERS, 1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = center_alignment

    for row_idx, product in enumerate(products, 2):
        values = (
            row_idx - 1,
            product.name,
            product.category,
            product.price,
            product.quantity,
            product.amount,
        )
        for col_idx, value in enumerate(values, 1):
            ws.cell(row=row_idx, column=col_idx, value=value)
        ws.cell(row=row_idx, column=4).number_format = MONEY_FORMAT
        ws.cell(row=row_idx, column=6).number_format = MONEY_FORMAT

    # Auto-adjust column widths
    for column in ws.columns:
        max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
        ws.column_dimensions[get_column_letter(column[0].column)].width = min(max_length + 2, 50)

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()
