from datetime import UTC, datetime
from importlib.metadata import PackageNotFoundError, version


def now() -> datetime:
    return datetime.now(UTC)


def format_size(size: int) -> str:
    """Human readable byte count used in error messages, e.g. `20 MB`."""
    if size >= 1024 * 1024:
        return f"{size // (1024 * 1024)} MB"
    if size >= 1024:
        return f"{size // 1024} KB"
    return f"{size} bytes"


def package_version() -> str:
    try:
        return version("champions-portal")
    except PackageNotFoundError:
        return "unknown"
