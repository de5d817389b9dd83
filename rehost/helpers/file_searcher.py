"""
Search order for rehost's config and dotenv files.
"""

from pathlib import Path
from typing import List, Optional


def generate_search_path_list(default_file: str, command_line_file: Optional[str]) -> List[str]:
    """
    Generate the list of paths to look for `default_file` in.

    The search order is:
    1. Home directory (~/default_file)
    2. Current directory (default_file)
    3. Command line specified file (command_line_file) if provided

    Later files take precedence when loaded in order. Paths that cannot be
    resolved are dropped and duplicates keep their last position.
    """
    files = [Path.home() / default_file, default_file]
    if command_line_file:
        files.append(command_line_file)

    resolved_files = []
    for fn in files:
        try:
            resolved_files.append(Path(fn).expanduser().resolve())
        except OSError:
            pass

    uniq = []
    for fn in reversed(resolved_files):
        if fn not in uniq:
            uniq.append(fn)
    uniq.reverse()

    return list(map(str, uniq))
