"""ReportLab PDF Generation Service Implementation

Implements purchase invoice rendering using ReportLab library.
"""

from io import BytesIO
from typing import Dict, List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Table,
    TableStyle,
    Paragraph,
    Spacer,
)

from src.app.services.pdf_service import PdfService
from src.domain.product import Product
from src.domain.purchase import Purchase
from src.domain.purchase_line import PurchaseLine


class ReportLabPdfService(PdfService):
    """
    ReportLab implementation of PdfService

    Generates purchase invoices using ReportLab.
    """

    def __init__(
        self,
        company_name: str = "Inventory Store",
        company_address: str = "",
        currency: str = "USD",
    ):
        self.company_name = company_name
        self.company_address = company_address
        self.currency = currency

    def generate_purchase_invoice(
        self,
        purchase: Purchase,
        lines: List[PurchaseLine],
        products: Dict[int, Product],
    ) -> bytes:
        """
        Generate an invoice PDF

        Args:
            purchase: Purchase header
            lines: Purchase lines (prices as frozen at purchase time)
            products: Products referenced by the lines, keyed by ID

        Returns:
            PDF document as bytes
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20 * mm,
            leftMargin=20 * mm,
            topMargin=20 * mm,
            bottomMargin=20 * mm,
            title=f"Invoice {purchase.invoice_number}",
        )

        styles = getSampleStyleSheet()
        elements = []

        title_style = ParagraphStyle(
            "TitleStyle",
            parent=styles["Heading1"],
            fontSize=24,
            spaceAfter=10,
            textColor=colors.HexColor("#2C3E50"),
        )
        subtitle_style = ParagraphStyle(
            "SubtitleStyle",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=colors.HexColor("#2C3E50"),
            spaceAfter=20,
        )
        header_style = ParagraphStyle(
            "HeaderStyle",
            parent=styles["Normal"],
            fontSize=10,
            textColor=colors.HexColor("#7F8C8D"),
        )
        normal_style = ParagraphStyle(
            "NormalStyle",
            parent=styles["Normal"],
            fontSize=10,
        )
        bold_style = ParagraphStyle(
            "BoldStyle",
            parent=styles["Normal"],
            fontSize=10,
            fontName="Helvetica-Bold",
        )

        elements.append(Paragraph(self.company_name, title_style))
        if self.company_address:
            elements.append(Paragraph(self.company_address, header_style))
        elements.append(Spacer(1, 10 * mm))
        elements.append(Paragraph("INVOICE", subtitle_style))

        status = purchase.status.value if hasattr(purchase.status, "value") else purchase.status
        invoice_info = [
            ["Invoice Number:", purchase.invoice_number],
            ["Status:", status.upper()],
            ["Currency:", self.currency],
            ["Purchase Date:", purchase.purchased_at.strftime("%Y-%m-%d %H:%M:%S UTC")],
        ]

        invoice_table = Table(invoice_info, colWidths=[40 * mm, 100 * mm])
        invoice_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 10),
                    ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#7F8C8D")),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
                ]
            )
        )

        elements.append(invoice_table)
        elements.append(Spacer(1, 10 * mm))

        elements.append(Paragraph("Bill To:", bold_style))
        elements.append(Paragraph(f"Customer ID: {purchase.user_id}", normal_style))
        elements.append(Spacer(1, 10 * mm))

        line_data = [["Product", "Lot", "Quantity", "Unit Price", "Subtotal"]]
        for line in lines:
            product = products.get(line.product_id)
            line_data.append(
                [
                    product.name if product else f"Product {line.product_id}",
                    product.lot_number if product else "",
                    str(line.quantity),
                    f"{self.currency} {line.unit_price:,.2f}",
                    f"{self.currency} {line.subtotal:,.2f}",
                ]
            )

        line_table = Table(
            line_data, colWidths=[60 * mm, 30 * mm, 20 * mm, 30 * mm, 30 * mm]
        )
        line_table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2C3E50")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, 0), 10),
                    ("ALIGN", (0, 0), (-1, 0), "CENTER"),
                    ("FONTSIZE", (0, 1), (-1, -1), 9),
                    ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#BDC3C7")),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    (
                        "ROWBACKGROUNDS",
                        (0, 1),
                        (-1, -1),
                        [colors.white, colors.HexColor("#F8F9F9")],
                    ),
                ]
            )
        )

        elements.append(line_table)
        elements.append(Spacer(1, 5 * mm))

        total_data = [
            ["", "", "", "Total:", f"{self.currency} {purchase.total_amount:,.2f}"]
        ]
        total_table = Table(total_data, colWidths=[60 * mm, 30 * mm, 20 * mm, 30 * mm, 30 * mm])
        total_table.setStyle(
            TableStyle(
                [
                    ("FONTNAME", (3, 0), (-1, -1), "Helvetica-Bold"),
                    ("FONTSIZE", (0, 0), (-1, -1), 11),
                    ("ALIGN", (3, 0), (-1, -1), "RIGHT"),
                    ("LINEABOVE", (3, 0), (-1, 0), 1.5, colors.HexColor("#2C3E50")),
                    ("TOPPADDING", (0, 0), (-1, -1), 8),
                ]
            )
        )

        elements.append(total_table)

        doc.build(elements)
        pdf_bytes = buffer.getvalue()
        buffer.close()

        return pdf_bytes
