"""Diploma registry core: records, ownership, update ledger and the facade."""
