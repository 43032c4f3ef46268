"""Worker ledger package."""

from stone_ledger.ledger.worker_ledger import WorkerLedger
from stone_ledger.ledger.exchange import (
    EXPORT_MIME_TYPE,
    export_ledger,
    export_records,
    import_into,
    parse_import,
)

__all__ = [
    "EXPORT_MIME_TYPE",
    "WorkerLedger",
    "export_ledger",
    "export_records",
    "import_into",
    "parse_import",
]
