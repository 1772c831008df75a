"""armkit — Azure Resource Manager identifiers and long-running operations."""

__version__ = "0.1.0"
