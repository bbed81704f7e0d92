"""
dwlr_ingest/mappers package marker.
"""
