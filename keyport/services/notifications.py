"""User-facing messages for export results."""

from keyport.services.export_service import ExportErrorCode, ExportResult


_ERROR_MESSAGES = {
    ExportErrorCode.NO_KEYBOARD.value: (
        "No keyboard connected. Please connect a ZMK Studio-compatible "
        "keyboard and try again."
    ),
    ExportErrorCode.RPC_FAILURE.value: (
        "Failed to communicate with keyboard. Please check the connection "
        "and try again."
    ),
    ExportErrorCode.UNKNOWN_BEHAVIOR.value: (
        "Export completed with warnings. Some behaviors could not be recognized "
        "and were marked with comments. The file was generated but should be "
        "reviewed manually before compiling."
    ),
    ExportErrorCode.INVALID_LAYER.value: (
        "Invalid layer configuration. Please ensure your keyboard has at least "
        "one configured layer."
    ),
}


def export_error_message(result: ExportResult) -> str:
    """Explain a failed export in terms a user can act on."""
    if result.error is None:
        return "Unknown error occurred"

    code = result.error.code
    if code in _ERROR_MESSAGES:
        return _ERROR_MESSAGES[code]
    if code == ExportErrorCode.GENERATION_FAILED.value:
        return (
            f"File generation failed: {result.error.message}. "
            "Please try again or report this issue."
        )
    return f"Export failed: {result.error.message}"


def export_success_message(filename: str) -> str:
    return (
        f'Keymap exported successfully as "{filename}". '
        "You can now compile this file with ZMK firmware builder."
    )


def warning_message(warnings: list[str]) -> str:
    """Summarize warnings of a partially successful export; empty when none."""
    if not warnings:
        return ""
    joined = "\n".join(warnings)
    return f"Export completed with {len(warnings)} warning(s):\n{joined}"
