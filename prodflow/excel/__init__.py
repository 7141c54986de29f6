"""Excel rendering layer."""
from prodflow.excel.generator import generate_document_xlsx

__all__ = ["generate_document_xlsx"]
