"""Output truncation — bound all tool output before it reaches the LLM."""

from __future__ import annotations

import os
import tempfile

MAX_LINES = 500
MAX_BYTES = 16 * 1024  # 16KB
OUTPUT_DIR = "~/.thinkact/tool-output"


def truncate_output(
    text: str,
    max_lines: int = MAX_LINES,
    max_bytes: int = MAX_BYTES,
    save_full: bool = False,
) -> str:
    """Truncate tool output to fit within the prompt budget.

    Observations are replayed into every later prompt of the run, so an
    oversized one is paid for on every iteration. The head is kept; when
    ``save_full`` is set the complete output is written to a temp file and
    the notice points at it.

    Args:
        text: Rendered tool output.
        max_lines: Maximum number of lines to keep.
        max_bytes: Maximum bytes to keep.
        save_full: Whether to save full output to a temp file when truncating.

    Returns:
        Truncated output string.
    """
    if not text:
        return text

    lines = text.split("\n")
    byte_count = len(text.encode("utf-8", errors="replace"))

    if len(lines) <= max_lines and byte_count <= max_bytes:
        return text

    full_path = _save_to_temp(text) if save_full else None

    kept = lines[:max_lines]
    skipped = len(lines) - len(kept)

    result = "\n".join(kept)
    result_bytes = result.encode("utf-8", errors="replace")
    if len(result_bytes) > max_bytes:
        # Cut at a safe UTF-8 boundary
        result = result_bytes[:max_bytes].decode("utf-8", errors="ignore")
        skipped_bytes = byte_count - max_bytes
    else:
        skipped_bytes = 0

    notice_parts = []
    if skipped > 0:
        notice_parts.append(f"{skipped} lines skipped")
    if skipped_bytes > 0:
        notice_parts.append(f"{skipped_bytes} bytes skipped")

    notice = f"[Output truncated: {', '.join(notice_parts)}. Total: {len(lines)} lines, {byte_count} bytes]"
    if full_path:
        notice += f"\n[Full output saved to: {full_path}]"

    return f"{result}\n{notice}"


def _save_to_temp(text: str) -> str:
    """Save full output to a temp file and return the path."""
    out_dir = os.path.expanduser(OUTPUT_DIR)
    os.makedirs(out_dir, exist_ok=True)
    fd, path = tempfile.mkstemp(prefix="thinkact-", suffix=".txt", dir=out_dir)
    with os.fdopen(fd, "w") as f:
        f.write(text)
    return path
