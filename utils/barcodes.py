"""Barcode generation for stock units produced on the line.

Every stage output gets a barcode made of a row id (the stock ledger row
for slit rolls, printed packs and cut rolls, the complete item row for
finished bundles) followed by the creation timestamp as ``ddmmyyHHMMSS``.
Received reels use ``{item_id}{reel_no}`` instead.
"""
from datetime import datetime
from typing import Optional

TIMESTAMP_FORMAT = "%d%m%y%H%M%S"


def generate_barcode(seq_id: int, now: Optional[datetime] = None) -> str:
    """Build the barcode for a stage output row.

    >>> generate_barcode(7, datetime(2025, 3, 15, 9, 5, 30))
    '7150325090530'
    """
    if seq_id is None or int(seq_id) <= 0:
        raise ValueError("seq_id must be a positive integer")
    now = now or datetime.now()
    return f"{int(seq_id)}{now.strftime(TIMESTAMP_FORMAT)}"


def material_barcode(item_id: int, reel_no: str) -> str:
    """Barcode of a received reel: its item id followed by the supplier reel number."""
    reel = str(reel_no).strip()
    if not reel.isdecimal():
        raise ValueError(f"Reel number must be numeric, got '{reel_no}'")
    return f"{int(item_id)}{reel}"


def parse_barcode(value) -> int:
    """Normalise a scanned barcode (str or int) to the integer stored in the ledger."""
    text = str(value).strip() if value is not None else ""
    if not text.isdecimal():
        raise ValueError(f"Invalid barcode format: '{value}'")
    return int(text)
