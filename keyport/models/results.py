"""Base result model for transcode operations."""

from datetime import datetime
from typing import Any

from pydantic import Field, model_validator

from keyport.core.structlog_logger import get_struct_logger
from keyport.models.base import KeyportBaseModel


logger = get_struct_logger(__name__)


class ResultError(KeyportBaseModel):
    """Tagged error carried by a failed result."""

    code: str
    message: str
    context: dict[str, Any] | None = None


class BaseResult(KeyportBaseModel):
    """Base class for all operation results.

    A result is a tagged union in practice: either ``success`` with optional
    warnings, or a failure carrying exactly one ``error``.
    """

    success: bool
    timestamp: datetime = Field(default_factory=datetime.now)
    warnings: list[str] = Field(default_factory=list)
    error: ResultError | None = None

    @model_validator(mode="after")
    def validate_success_consistency(self) -> "BaseResult":
        """Ensure success flag is consistent with the error."""
        if self.error is not None and self.success:
            logger.warning("result_success_mismatch", error_code=self.error.code)
            self.success = False
        return self

    def add_warning(self, warning: str) -> None:
        """Add a non-fatal warning."""
        self.warnings.append(warning)
        logger.debug("result_warning_added", warning=warning)

    def fail(
        self, code: str, message: str, context: dict[str, Any] | None = None
    ) -> None:
        """Mark the result as failed with a tagged error."""
        self.error = ResultError(code=code, message=message, context=context)
        self.success = False
        logger.debug("result_failed", error_code=code, message=message)

    def is_success(self) -> bool:
        """Check if the operation was successful."""
        return self.success and self.error is None

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the result."""
        return {
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
            "warning_count": len(self.warnings),
            "error": self.error.to_dict() if self.error else None,
        }


__all__ = ["BaseResult", "ResultError"]
