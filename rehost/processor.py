import logging
from collections import Counter
from enum import Enum

import git

from rehost.probe import ProbeStatus, probe_remote
from rehost.remotes import ANY_GIT_ERROR, Remote, find_dirty_remotes, rewrite_uri, set_remote

logger = logging.getLogger(__name__)


class RepoStatus(Enum):
    CLEAN = "clean"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


def process_repository(path, config, session, io):
    """Move the remotes of the repository at `path` to `config.to_host`.

    A remote only changes when its rewritten URI answers a probe. Errors
    are reported and swallowed so the caller can move on to the next
    repository.
    """
    try:
        repo = git.Repo(path)
    except ANY_GIT_ERROR as err:
        io.tool_error(f"Failed to process {path}")
        io.tool_error(str(err))
        return RepoStatus.FAILED

    with repo:
        try:
            remotes = find_dirty_remotes(repo, config.from_host)
        except ANY_GIT_ERROR as err:
            io.tool_error(f"Failed to process {repo.git_dir}")
            io.tool_error(str(err))
            return RepoStatus.FAILED

        if not remotes:
            io.tool_output(f"-- {repo.git_dir} is clean")
            return RepoStatus.CLEAN

        io.tool_output(f"> Processing {path}")
        io.tool_output("  Remotes to process:")
        for remote in remotes:
            io.tool_output(f"  - {remote.name}: {remote.uri}")
        io.tool_output(f"  Changing remotes to {config.to_host}")

        changed = 0
        for remote in remotes:
            new_uri = rewrite_uri(remote.uri, config.from_host, config.to_host)
            new_remote = Remote(remote.name, new_uri)
            if not check_remote(new_remote, config, session, io):
                continue
            if update_remote(repo, new_remote, remote.config_uri or remote.uri, config, io):
                changed += 1

    return RepoStatus.UPDATED if changed else RepoStatus.UNCHANGED


def check_remote(remote, config, session, io):
    result = probe_remote(remote.uri, session)
    if result.status is ProbeStatus.OK:
        return True
    if result.status is ProbeStatus.NOT_FOUND:
        io.tool_error(f"    | {config.to_host} remote does not exist, keeping current URI")
    else:
        io.tool_error(f"    | Polling remote failed, keeping current URI ({result.message})")
    return False


def update_remote(repo, remote, old_uri, config, io):
    if config.dry_run:
        io.tool_output(f"  - would change {remote.name} to {remote.uri} (dry run)")
        return False

    io.tool_output(f"  - changing {remote.name} to {remote.uri}")
    try:
        set_remote(repo, remote, old_uri)
    except ANY_GIT_ERROR as err:
        io.tool_error(f"    | cannot change remote, {err}")
        return False
    return True


def process_repositories(paths, config, session, io):
    counts = Counter()
    for path in paths:
        status = process_repository(path, config, session, io)
        logger.debug("%s: %s", path, status.value)
        counts[status] += 1
    return counts
