"""Blob file operations on the local storage root."""

import re
from pathlib import Path, PurePosixPath


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for safe filesystem storage on Unix-like systems.

    Removes dangerous characters, prevents path traversal, and handles edge cases
    while preserving readability and file extensions.

    Args:
        filename: Original filename from user

    Returns:
        Sanitized filename safe for filesystem use
    """
    # Remove path components to prevent traversal attacks
    # Browsers on Windows may send "C:\\Users\\...\\name.pdf"
    filename = PurePosixPath(filename.replace("\\", "/")).name

    # Remove leading dots to prevent hidden files
    filename = filename.lstrip(".")

    # Replace dangerous characters with underscores
    # Allow only word characters, spaces, dots, and hyphens
    sanitized = re.sub(r"[^\w\s.-]", "_", filename)

    # Replace multiple underscores with single underscore
    sanitized = re.sub(r"_+", "_", sanitized)

    # Replace multiple spaces with single space
    sanitized = re.sub(r"\s+", " ", sanitized)

    # Limit length to 100 characters while preserving extension
    if len(sanitized) > 100:
        parts = sanitized.rsplit(".", 1)
        if len(parts) == 2:
            name, ext = parts
            max_name_len = 96 - len(ext)
            sanitized = f"{name[:max_name_len]}.{ext}" if max_name_len > 0 else f"file.{ext}"
        else:
            sanitized = sanitized[:100]

    # Ensure non-empty and meaningful result
    # Check if result is empty or contains only whitespace/underscores/dots/hyphens
    if not sanitized or not re.sub(r"[\s._-]", "", sanitized):
        sanitized = "unnamed_file"

    return sanitized


def build_resource_storage_path(uploader_id: str, timestamp_ms: int, filename: str) -> str:
    """Blob path of an uploaded resource file: `resources/<uploader>/<timestamp>_<name>`."""
    return f"resources/{uploader_id}/{timestamp_ms}_{sanitize_filename(filename)}"


def resolve_blob_path(storage_root: str, storage_path: str) -> Path:
    """Absolute path of a blob. Raises ValueError when the path escapes the storage root."""
    root = Path(storage_root).resolve()
    path = (root / storage_path).resolve()
    if not path.is_relative_to(root) or path == root:
        raise ValueError(f"Invalid storage path: {storage_path}")
    return path


def write_blob(storage_root: str, storage_path: str, content: bytes) -> Path:
    """Write blob to disk, creating parent directories. Returns the absolute path."""
    file_path = resolve_blob_path(storage_root, storage_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_bytes(content)
    return file_path


def delete_blob(storage_root: str, storage_path: str) -> None:
    """Remove a blob. Raises FileNotFoundError when it is already gone."""
    resolve_blob_path(storage_root, storage_path).unlink()
