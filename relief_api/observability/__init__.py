"""
Observability setup for tracing and request logging.
"""
