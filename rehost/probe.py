import logging
import re
import sys
from dataclasses import dataclass
from enum import Enum

import git

logger = logging.getLogger(__name__)

DEFAULT_PROBE_REMOTE = "git@github.com:git/git.git"

# What git/ssh print when the server answers but the repository is missing
NOT_FOUND_PATTERNS = [
    re.compile(r"repository not found", re.IGNORECASE),
    re.compile(r"repository '.*' not found", re.IGNORECASE),
    re.compile(r"does not appear to be a git repository", re.IGNORECASE),
    re.compile(r"repository does not exist", re.IGNORECASE),
]


class ProbeStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not-found"
    FAILED = "failed"


@dataclass(frozen=True)
class ProbeResult:
    status: ProbeStatus
    message: str = ""

    @property
    def ok(self):
        return self.status is ProbeStatus.OK


def _error_message(err):
    if isinstance(err, git.exc.GitCommandError):
        stderr = (err.stderr or "").strip()
        # GitPython wraps stderr as "stderr: '...'"
        if stderr.startswith("stderr:"):
            stderr = stderr[len("stderr:") :].strip().strip("'").strip()
        if stderr:
            return stderr
    return str(err)


def is_not_found(message):
    return any(pattern.search(message) for pattern in NOT_FOUND_PATTERNS)


def probe_remote(uri, session):
    """List the refs at `uri` with the session's identity.

    Read-only; nothing at the remote changes. Never raises for git
    failures, the outcome is returned as a ProbeResult.
    """
    logger.debug("Probing %s", uri)
    try:
        session.git().ls_remote("--", uri)
    except (git.exc.GitError, OSError) as err:
        message = _error_message(err)
        logger.debug("Probe of %s failed: %s", uri, message)
        if is_not_found(message):
            return ProbeResult(ProbeStatus.NOT_FOUND, message)
        return ProbeResult(ProbeStatus.FAILED, message)
    return ProbeResult(ProbeStatus.OK)


def check_connection(io, session, uri=DEFAULT_PROBE_REMOTE, host_label=None):
    """Gate the whole run on the reference remote being reachable."""
    result = probe_remote(uri, session)
    if result.ok:
        io.tool_output(f"Access to {uri} verified")
        return

    io.tool_error(f"Access to {host_label or uri} failed")
    io.tool_error(result.message)
    sys.exit(1)
