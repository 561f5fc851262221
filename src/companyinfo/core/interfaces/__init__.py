"""Contracts (Protocol) implemented by the source adapters."""
