"""Warehouse management backend: stock queries, transactions and the inbound API."""

__version__ = "0.1.0"