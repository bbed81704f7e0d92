"""
Water level upload ingestion and normalization service.
"""

__version__ = "1.0.0"
