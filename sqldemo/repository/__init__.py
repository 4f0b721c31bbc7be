"""Repository layer: raw SQL query functions.

Keep functions thin: one statement each, values bound positionally.
"""
from __future__ import annotations
