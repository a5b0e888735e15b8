"""Products API: Azure SQL product list behind a token-authenticated connection."""

__version__ = "1.0.0"
