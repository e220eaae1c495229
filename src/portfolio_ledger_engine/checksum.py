# src/portfolio_ledger_engine/checksum.py
import zlib

from .dateutils import DateLike, format_normalized_date
from .math_utils import format_number


def calculate_generic_checksum(operation_date: DateLike, *amounts: float) -> str:
    """
    Derives the 8-character hex deduplication key of a ledger operation.

    The key is a CRC32 over the colon-joined ISO date and amounts, so 100 and 100.0
    collide. It identifies re-ingested records; it is not an integrity check.
    """
    payload = ":".join([format_normalized_date(operation_date), *(format_number(a) for a in amounts)])
    return f"{zlib.crc32(payload.encode('utf-8')) & 0xFFFFFFFF:08x}"
