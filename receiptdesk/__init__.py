"""
receiptdesk — consent receipt front-end service.
"""
__version__ = "0.1.0"
