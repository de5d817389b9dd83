import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

BUILD_OUTPUT_DIRS = ("target",)


def find_git_repositories(root, skip_dirs=BUILD_OUTPUT_DIRS, on_error=None):
    """Return the top-level directory of every git repository under `root`.

    Pre-order walk that never descends into a directory named in
    `skip_dirs`, nor into a repository it already found. `root` itself
    is returned when it is a repository.
    """
    skip_dirs = set(skip_dirs or ())
    repos = []

    def onerror(err):
        logger.debug("Cannot read %s: %s", err.filename, err)
        if on_error:
            on_error(err)

    for dirpath, dirnames, _ in os.walk(root, topdown=True, onerror=onerror):
        dirpath = Path(dirpath)
        if dirpath.name in skip_dirs:
            dirnames[:] = []
            continue
        if (dirpath / ".git").exists():
            repos.append(dirpath)
            dirnames[:] = []
            continue
        dirnames.sort()

    logger.debug("Found %d repositories under %s", len(repos), root)
    return repos
