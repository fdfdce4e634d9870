"""
PDF rendering for invoices, purchase orders, return receipts and reports.

Documents are drawn on an A4 reportlab canvas: a bold title, the company
line and the print date, then either an item table or report rows. Rows that
run past the bottom margin continue on a new page. The sales report embeds a
matplotlib bar chart of the monthly totals.
"""

import io
import logging
from typing import Any, Dict, Iterable, List, Optional

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
from reportlab.lib.pagesizes import A4  # noqa: E402
from reportlab.lib.utils import ImageReader  # noqa: E402
from reportlab.pdfgen import canvas  # noqa: E402

from simplestore.core.config import today  # noqa: E402
from simplestore.services.settings_service import DEFAULT_COMPANY_NAME  # noqa: E402

logger = logging.getLogger(__name__)

FONT_SIZE = 12
TITLE_SIZE = 20
LINE_HEIGHT = 20
LEFT = 50
BOTTOM_MARGIN = 100
TABLE_COLUMNS = ((LEFT, "Product"), (250, "Quantity"), (350, "Price"), (450, "Total"))
FOOTER = "Thank you for your business!"

MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def _fmt(value: Any) -> str:
    return "" if value is None else str(value)


class PdfWriter:
    """Thin stateful wrapper over a canvas that tracks the current line."""

    def __init__(self, title: str, company_name: str) -> None:
        self.buffer = io.BytesIO()
        self.canvas = canvas.Canvas(self.buffer, pagesize=A4)
        self.width, self.height = A4
        self.canvas.setTitle(title)
        self.y = self.height - 50
        self._header(title, company_name)

    def _header(self, title: str, company_name: str) -> None:
        c = self.canvas
        c.setFont("Helvetica-Bold", TITLE_SIZE)
        c.drawString(LEFT, self.height - 50, title)
        c.setFont("Helvetica", FONT_SIZE)
        c.drawString(LEFT, self.height - 80, company_name)
        c.drawString(LEFT, self.height - 100, f"Date: {today().isoformat()}")
        self.y = self.height - 130

    def text(self, value: str, x: float = LEFT, bold: bool = False) -> None:
        self.canvas.setFont("Helvetica-Bold" if bold else "Helvetica", FONT_SIZE)
        self.canvas.drawString(x, self.y, value)

    def advance(self, lines: int = 1) -> None:
        self.y -= LINE_HEIGHT * lines
        if self.y < BOTTOM_MARGIN:
            self.canvas.showPage()
            self.y = self.height - 50

    def image(self, png: bytes, width: float, height: float) -> None:
        if self.y - height < BOTTOM_MARGIN:
            self.canvas.showPage()
            self.y = self.height - 50
        self.canvas.drawImage(
            ImageReader(io.BytesIO(png)), LEFT, self.y - height, width=width, height=height
        )
        self.y -= height + LINE_HEIGHT

    def finish(self) -> bytes:
        self.canvas.setFont("Helvetica", FONT_SIZE)
        self.canvas.drawString(self.width / 2 - 100, 50, FOOTER)
        self.canvas.showPage()
        self.canvas.save()
        return self.buffer.getvalue()


class PdfService:
    def __init__(self, company_name: Optional[str] = None) -> None:
        self.company_name = company_name or DEFAULT_COMPANY_NAME

    def render_document(
        self,
        title: str,
        entity_type: str,
        entity_name: str,
        document_number: str,
        document_date,
        items: Iterable[Dict[str, Any]],
        total_amount,
    ) -> bytes:
        """Render an invoice-style document with an item table.

        ``items`` are dicts with product_name, quantity, price and total.
        """
        pdf = PdfWriter(title, self.company_name)
        pdf.text(f"{entity_type}: {entity_name}")
        pdf.advance()
        pdf.text(f"Document Number: {document_number}")
        pdf.advance()
        pdf.text(f"Date: {_fmt(document_date)}")
        pdf.advance(2)

        for x, label in TABLE_COLUMNS:
            pdf.text(label, x=x, bold=True)
        pdf.advance()

        for item in items:
            pdf.text(_fmt(item["product_name"]), x=TABLE_COLUMNS[0][0])
            pdf.text(_fmt(item["quantity"]), x=TABLE_COLUMNS[1][0])
            pdf.text(_fmt(item["price"]), x=TABLE_COLUMNS[2][0])
            pdf.text(_fmt(item["total"]), x=TABLE_COLUMNS[3][0])
            pdf.advance()

        pdf.advance()
        pdf.text("Total Amount:", x=350, bold=True)
        pdf.text(_fmt(total_amount), x=450, bold=True)
        return pdf.finish()

    def render_document_for(self, title: str, entity_type: str, document) -> bytes:
        """Render a purchase order, sales order or return entity."""
        party = getattr(document, "vendor", None) or getattr(document, "customer", None)
        number = getattr(document, "order_number", None) or getattr(
            document, "return_number", None
        )
        items = [
            {
                "product_name": line.product.name if line.product else line.product_id,
                "quantity": line.quantity,
                "price": line.price,
                "total": line.total,
            }
            for line in document.items
        ]
        return self.render_document(
            title,
            entity_type,
            party.name if party else "",
            number,
            document.date,
            items,
            document.total_amount,
        )

    def render_report(
        self, title: str, rows: List[str], chart_png: Optional[bytes] = None
    ) -> bytes:
        pdf = PdfWriter(title, self.company_name)
        if chart_png:
            pdf.image(chart_png, width=495, height=250)
        for row in rows:
            pdf.text(row)
            pdf.advance()
        return pdf.finish()

    def monthly_sales_chart(self, year: int, monthly: List[Dict[str, Any]]) -> bytes:
        """Bar chart PNG of the twelve monthly totals."""
        totals = [float(row["total"]) for row in monthly]
        plt.figure(figsize=(10, 5))
        try:
            plt.bar(MONTH_LABELS, totals, color="steelblue")
            plt.title(f"Monthly Sales {year}")
            plt.xlabel("Month")
            plt.ylabel("Sales")
            plt.tight_layout()

            buf = io.BytesIO()
            plt.savefig(buf, format="png", dpi=100)
            buf.seek(0)
            return buf.read()
        finally:
            plt.close()


# ------------------- report row builders -------------------


def _iso(value) -> str:
    return value.isoformat() if value else "N/A"


def inventory_rows(report: List[Dict[str, Any]]) -> List[str]:
    return [
        "Product Code | Product Name | Category | Stock | Cost Price | Total Value",
        "-" * 67,
        *(
            f"{r['code']} | {r['name']} | {_fmt(r['category_name'])} | {r['stock']} | "
            f"{r['cost_price']} | {r['total_value']}"
            for r in report
        ),
    ]


def balance_rows(report: List[Dict[str, Any]], party_label: str, party_key: str) -> List[str]:
    return [
        f"Order Number | Date | {party_label} | Total Amount | Due Date | Status | "
        "Remaining | Age (days)",
        "-" * 79,
        *(
            f"{r['order_number']} | {_iso(r['date'])} | {_fmt(r[party_key])} | "
            f"{r['total_amount']} | {_iso(r['due_date'])} | {r['status']} | "
            f"{r['remaining_amount']} | {r['age_days']}"
            for r in report
        ),
    ]


def profit_loss_rows(report: Dict[str, Any]) -> List[str]:
    return [
        f"Period: {report['year']}-{report['month']:02d}",
        "-" * 40,
        f"Total Sales: {report['total_sales']}",
        f"Cost of Goods Sold: {report['total_cogs']}",
        f"Gross Profit: {report['gross_profit']}",
        f"Total Returns: {report['total_returns']}",
        f"Net Profit: {report['net_profit']}",
    ]


def monthly_sales_rows(year: int, monthly: List[Dict[str, Any]]) -> List[str]:
    rows = [f"Year: {year}", "Month | Total Sales", "-" * 40]
    rows.extend(f"{MONTH_LABELS[r['month'] - 1]} | {r['total']}" for r in monthly)
    total = sum((r["total"] for r in monthly), 0)
    rows.append(f"Total | {total}")
    return rows
