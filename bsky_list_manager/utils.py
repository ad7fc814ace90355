import sys
from typing import Any, Dict


def format_time(seconds: float) -> str:
    """Format seconds into MM:SS format."""
    minutes = int(seconds // 60)
    seconds = int(seconds % 60)
    return f"{minutes:02d}:{seconds:02d}"


def create_progress_bar(current: int, total: int, width: int = 30) -> str:
    """Create a progress bar string."""
    if total <= 0:
        return f"[{'-' * width}] 0.0%"
    filled = int(width * current / total)
    bar = "=" * filled + "-" * (width - filled)
    percent = current / total * 100
    return f"[{bar}] {percent:.1f}%"


def print_progress(message: str):
    """Rewrite the current console line."""
    print(f"\r  {message}", end="", flush=True)


def print_error(message: str):
    print(f"Error: {message}", file=sys.stderr)


def print_warning(message: str):
    # Leading newline so the warning does not overwrite a progress line
    print(f"\nWarning: {message}", file=sys.stderr)


def print_status(stats: Dict[str, Any]):
    """Print the run summary in a formatted way."""
    print("\n=== Summary ===")
    print(f"Follows found: {stats['total']}")
    print(f"Added to list: {stats['added_to_list']}")
    print(f"Failed: {stats['failed']}")
    if stats.get('elapsed'):
        print(f"Elapsed: {format_time(stats['elapsed'])}")
    print("=" * 15)
