"""Field extraction from positioned document text."""
from .pipeline import FieldExtractionPipeline

__version__ = "0.1.0"

__all__ = ["FieldExtractionPipeline"]
