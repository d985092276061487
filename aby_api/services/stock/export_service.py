"""
Stock Export Service

Writes the stock movement journal to an Excel workbook for the store keepers.
"""
from io import BytesIO
from typing import List
from datetime import datetime
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, Alignment, Border, Side, PatternFill
from openpyxl.utils import get_column_letter

from aby_api.models.stock import StockHistory

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = [
    ("Date", 20),
    ("SKU", 14),
    ("Product", 30),
    ("Movement", 12),
    ("Source", 12),
    ("Source ID", 10),
    ("Qty Before", 12),
    ("Qty Change", 12),
    ("Qty After", 12),
    ("Unit Price", 12),
    ("Notes", 40),
]


class StockExportService:
    """Excel exports of stock data"""

    def history_workbook(self, entries: List[StockHistory], title: str = "Stock History") -> bytes:
        """Render movement journal rows as an .xlsx document"""
        wb = Workbook()
        ws = wb.active
        ws.title = "History"

        # Define styles
        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
        header_alignment = Alignment(horizontal="center", vertical="center")
        border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        ws['A1'] = title
        ws['A1'].font = Font(size=16, bold=True)
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(HISTORY_COLUMNS))
        ws['A2'] = f"Generated: {datetime.now().strftime('%d/%m/%Y %H:%M:%S')}"

        header_row = 4
        for col, (header, width) in enumerate(HISTORY_COLUMNS, 1):
            cell = ws.cell(row=header_row, column=col, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = header_alignment
            cell.border = border
            ws.column_dimensions[get_column_letter(col)].width = width

        for row, entry in enumerate(entries, header_row + 1):
            stock = entry.stock_in
            values = [
                entry.created_at.strftime('%d/%m/%Y %H:%M') if entry.created_at else "",
                stock.sku if stock else "",
                stock.product_name if stock else "",
                entry.movement_type,
                entry.source_type,
                entry.source_id,
                float(entry.qty_before),
                float(entry.qty_change),
                float(entry.qty_after),
                float(entry.unit_price) if entry.unit_price is not None else None,
                entry.notes or "",
            ]
            for col, value in enumerate(values, 1):
                cell = ws.cell(row=row, column=col, value=value)
                cell.border = border

        ws.freeze_panes = ws.cell(row=header_row + 1, column=1)

        buffer = BytesIO()
        wb.save(buffer)
        logger.info(f"Exported {len(entries)} stock history rows")
        return buffer.getvalue()
