# src/chronicle/store/schema.py
"""SQLAlchemy table definitions for the cell store.

Uses SQLAlchemy Core (not ORM). A wide-column table is flattened into
one row per cell version, keyed by (row_key, family, qualifier,
timestamp). BLOB keys compare bytewise, so ordering by row_key gives
the same order a wide-column store would scan in.
"""

from sqlalchemy import (
    BigInteger,
    Column,
    Index,
    LargeBinary,
    MetaData,
    Table,
    Text,
)

# Shared metadata for all tables
metadata = MetaData()

cells_table = Table(
    "cells",
    metadata,
    Column("row_key", LargeBinary, primary_key=True),
    Column("family", LargeBinary(64), primary_key=True),
    Column("qualifier", LargeBinary, primary_key=True),
    Column("timestamp", BigInteger, primary_key=True),
    Column("value_json", Text, nullable=False),
)

Index("ix_cells_row_key", cells_table.c.row_key)
