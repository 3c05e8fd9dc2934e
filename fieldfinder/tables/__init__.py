"""Document table model."""
from .document_table import DocumentTable

__all__ = ["DocumentTable"]
