"""Import bank transactions from Nordigen into YNAB without duplicates."""

__version__ = "0.1.0"
