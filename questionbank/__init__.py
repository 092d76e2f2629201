"""Question bank: knowledge area / topic hierarchy service and client."""

__version__ = "1.0.0"
