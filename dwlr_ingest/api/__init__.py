"""
dwlr_ingest/api package marker.
"""
