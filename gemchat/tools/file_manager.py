"""
GEMCHAT v1 — tools/file_manager.py
Disk side of the chat shell:
  - resolve_extension: loose file-type word → extension (total, never raises)
  - generated_filename: <type>_<epoch ms><ext> for natural-language file requests
  - file_write: write text into the working directory, errors returned not raised
"""

from __future__ import annotations
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger

DEFAULT_EXTENSION = ".txt"

EXTENSIONS: Dict[str, str] = {
    "javascript": ".js",  "js":   ".js",
    "python":     ".py",  "py":   ".py",
    "html":       ".html",
    "css":        ".css",
    "typescript": ".ts",  "ts":   ".ts",
    "json":       ".json",
    "markdown":   ".md",  "md":   ".md",
    "text":       ".txt", "txt":  ".txt",
    "yaml":       ".yaml", "yml": ".yml",
    "shell":      ".sh",  "bash": ".sh", "sh": ".sh",
    "go":         ".go",
    "rust":       ".rs",  "rs":   ".rs",
    "java":       ".java",
    "c":          ".c",
    "cpp":        ".cpp", "c++":  ".cpp",
    "csv":        ".csv",
    "xml":        ".xml",
    "sql":        ".sql",
    "jsx":        ".jsx",
    "tsx":        ".tsx",
}


@dataclass
class ToolResult:
    success: bool
    error: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)


def resolve_extension(file_type: str) -> str:
    return EXTENSIONS.get((file_type or "").strip().lower(), DEFAULT_EXTENSION)


def generated_filename(file_type: str, now_ms: Optional[int] = None) -> str:
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"{file_type}_{now_ms}{resolve_extension(file_type)}"


def file_write(path: str, content: str, workspace: Optional[Path] = None) -> ToolResult:
    """Write content verbatim. Relative paths land in the working directory."""
    ws = Path(workspace).resolve() if workspace else Path.cwd()
    if not path or not path.strip():
        return ToolResult(False, error="No filename given")
    try:
        p = (ws / path).resolve()
        p.write_text(content, encoding="utf-8")
        lines = len(content.splitlines())
        rel = str(p.relative_to(ws)) if p.is_relative_to(ws) else str(p)
        logger.debug("wrote {} ({} bytes)", p, len(content.encode("utf-8")))
        return ToolResult(True, metadata={"path": rel, "lines": lines})
    except (OSError, ValueError) as exc:
        logger.debug("write failed for {}: {}", path, exc)
        return ToolResult(False, error=str(exc))
