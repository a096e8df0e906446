"""Ledgerdrop - batch ingestion of invoice and credit memo documents."""

__version__ = "0.1.0"
