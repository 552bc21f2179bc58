from .unit_of_work import SqlAlchemyUnitOfWork
from .database import build_engine, build_session_factory
from .pdf_service import ReportLabPdfService
from .store_errors import translate_store_errors, is_transient

__all__ = [
    "SqlAlchemyUnitOfWork",
    "build_engine",
    "build_session_factory",
    "ReportLabPdfService",
    "translate_store_errors",
    "is_transient",
]
