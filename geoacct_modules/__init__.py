"""
Module: geoacct_modules
Responsibility:
    Service layer over the engines: fixed-asset postings, WIP and
    reporting.  Services read and write through a ``LedgerStore`` and own
    the unit-of-work boundary of every write.

Architecture position:
    Modules -- may import geoacct_kernel and geoacct_engines.
"""
