from gemchat.tools.file_manager import (
    file_write, resolve_extension, generated_filename,
    ToolResult, EXTENSIONS, DEFAULT_EXTENSION,
)
__all__ = [
    "file_write", "resolve_extension", "generated_filename",
    "ToolResult", "EXTENSIONS", "DEFAULT_EXTENSION",
]
