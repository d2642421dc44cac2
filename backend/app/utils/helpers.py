"""
Helper utilities for the application.
"""
from typing import Any, Dict, Sequence

from fastapi.responses import JSONResponse

FALLBACK_SAMPLE_ROWS = 10


def error_response(message: str, status_code: int = 400, error_code: str = None) -> JSONResponse:
    """
    Create a standard error response.

    Args:
        message: Error message
        status_code: HTTP status code
        error_code: Optional error code

    Returns:
        JSONResponse with error details
    """
    content = {
        "status": "error",
        "message": message
    }

    if error_code:
        content["error"] = error_code

    return JSONResponse(
        status_code=status_code,
        content=content
    )


def format_fallback_answer(rows: Sequence[Dict[str, Any]], row_count: int) -> str:
    """
    Readable summary of result rows, used when answer composition fails.

    Args:
        rows: Result rows
        row_count: Total rows returned

    Returns:
        Markdown text with one numbered line per sampled row
    """
    text = f"## 📊 Query Results\n\nI found {row_count} record{'s' if row_count != 1 else ''}.\n\n"
    if not rows:
        return text

    text += "**Summary:**\n\n"
    for idx, row in enumerate(rows[:FALLBACK_SAMPLE_ROWS], start=1):
        if row:
            text += f"{idx}. " + " | ".join(f"**{k}**: {v}" for k, v in row.items()) + "\n"
    if row_count > FALLBACK_SAMPLE_ROWS:
        text += f"\n*(Showing first {FALLBACK_SAMPLE_ROWS} of {row_count} results)*"
    return text
