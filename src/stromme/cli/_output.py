"""CLI output formatting in text or JSON mode.

Rendered output and success payloads go to stdout; errors go to stderr.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional, TextIO

from stromme.core.exceptions import StrommeError


class OutputFormatter:
    """Output formatter shared by CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON; otherwise output text
            indent: JSON indentation level
        """
        self.json_mode = json_mode
        self.indent = indent

    def _dump(self, payload: Dict[str, Any], stream: TextIO) -> None:
        print(json.dumps(payload, indent=self.indent, default=str, ensure_ascii=False), file=stream)

    def success(
        self,
        data: Dict[str, Any],
        message: str,
        *,
        status: str = "success",
    ) -> None:
        """Print ``message`` in text mode, or ``data`` plus ``status`` as JSON."""
        if self.json_mode:
            self._dump({"status": status, **data}, sys.stdout)
        else:
            print(message)

    def error(self, error: Exception, *, error_code: Optional[str] = None) -> None:
        """Report ``error`` on stderr.

        In JSON mode a :class:`StrommeError` contributes its class name as
        the default code and its ``context`` mapping.
        """
        if not self.json_mode:
            print(f"Error: {error}", file=sys.stderr)
            return

        if isinstance(error, StrommeError):
            details = error.to_json_error()
            payload: Dict[str, Any] = {
                "error": error_code or details["code"],
                "message": details["message"],
            }
            if details["context"]:
                payload["context"] = details["context"]
        else:
            payload = {"error": error_code or "error", "message": str(error)}
        self._dump(payload, sys.stderr)


__all__ = ["OutputFormatter"]
