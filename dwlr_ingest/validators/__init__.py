"""
dwlr_ingest/validators package marker.
"""
