"""Company registry lookup: tax authority + business registry aggregation."""

__version__ = "0.1.0"
