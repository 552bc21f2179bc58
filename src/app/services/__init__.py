from .unit_of_work import UnitOfWork
from .invoice_sequencer import InvoiceSequencer, generate_invoice_number
from .pdf_service import PdfService

__all__ = [
    "UnitOfWork",
    "InvoiceSequencer",
    "generate_invoice_number",
    "PdfService",
]
