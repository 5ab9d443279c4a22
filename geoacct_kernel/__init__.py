"""
geoacct kernel

Shared core of the geotechnical project-accounting engine:
- Typed exceptions and structured logging
- Reference directories (accounts, cash-flow categories)
- Entry-kind normalization with an explicit sign convention
- Persistence through selectors (read) and the ledger store (atomic write)
"""

__version__ = "0.1.0"
