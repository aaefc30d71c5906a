"""Export and import services."""

from keyport.services.export_service import (
    ExportErrorCode,
    ExportResult,
    ExportService,
    create_export_service,
)
from keyport.services.import_service import (
    ApplyResult,
    ImportErrorCode,
    ImportResult,
    ImportService,
    ValidationResult,
    create_import_service,
)


__all__ = [
    "ExportErrorCode",
    "ExportResult",
    "ExportService",
    "create_export_service",
    "ApplyResult",
    "ImportErrorCode",
    "ImportResult",
    "ImportService",
    "ValidationResult",
    "create_import_service",
]
