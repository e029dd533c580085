"""tripsheet - Spreadsheet trip plans turned into annotated itineraries with an expense ledger."""

__version__ = "1.0.0"
