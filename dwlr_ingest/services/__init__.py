"""
dwlr_ingest/services package marker.
"""
