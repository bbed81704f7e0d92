"""
dwlr_ingest/schemas package marker.
"""
