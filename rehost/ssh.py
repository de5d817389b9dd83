"""
Process-wide SSH identity for git network operations.

git is driven through GitPython, which runs the ``git`` binary, so the
identity is handed to ssh through the environment of each git subprocess:

* ``GIT_SSH_COMMAND`` selects the private key.
* a passphrase is answered by a tiny askpass helper which echoes
  ``REHOST_SSH_PASSPHRASE``; the passphrase itself is never written to disk.

``setup_ssh()`` builds the session once. Every later call returns the same
session, and callers pass it explicitly to whatever talks to a remote.
"""

import atexit
import logging
import os
import shlex
import shutil
import stat
import tempfile
import threading
from pathlib import Path

import git

logger = logging.getLogger(__name__)

PASSPHRASE_ENV = "REHOST_SSH_PASSPHRASE"

ASKPASS_SCRIPT = f"""#!/bin/sh
printf '%s\\n' "${PASSPHRASE_ENV}"
"""

_lock = threading.Lock()
_session = None


class SshSession:
    """The SSH identity (key + passphrase) shared by all remote operations."""

    def __init__(self, key=None, passphrase=""):
        self.key = Path(key).expanduser() if key else None
        self.passphrase = passphrase or ""
        self._askpass_dir = None
        self.env = self._build_env()

    def _build_env(self):
        cmd = ["ssh"]
        if self.key:
            cmd += ["-i", str(self.key), "-o", "IdentitiesOnly=yes"]
        if not self.passphrase:
            cmd += ["-o", "BatchMode=yes"]

        env = {
            "GIT_SSH_COMMAND": " ".join(shlex.quote(part) for part in cmd),
            "GIT_TERMINAL_PROMPT": "0",
        }

        if self.passphrase:
            env.update(
                {
                    "SSH_ASKPASS": str(self._write_askpass()),
                    "SSH_ASKPASS_REQUIRE": "force",
                    "DISPLAY": os.environ.get("DISPLAY") or ":0",
                    PASSPHRASE_ENV: self.passphrase,
                }
            )
        return env

    def _write_askpass(self):
        self._askpass_dir = tempfile.mkdtemp(prefix="rehost-askpass-")
        script = Path(self._askpass_dir) / "askpass.sh"
        script.write_text(ASKPASS_SCRIPT)
        script.chmod(stat.S_IRWXU)
        logger.debug("Wrote askpass helper to %s", script)
        return script

    def git(self):
        """Return a ``git.cmd.Git`` that runs with this identity."""
        cmd = git.cmd.Git()
        cmd.update_environment(**self.env)
        return cmd

    def close(self):
        if self._askpass_dir:
            shutil.rmtree(self._askpass_dir, ignore_errors=True)
            self._askpass_dir = None

    def __repr__(self):
        # never show the passphrase
        return f"SshSession(key={self.key!r}, passphrase={'***' if self.passphrase else ''!r})"


def setup_ssh(key=None, passphrase=""):
    """Install the process-wide SSH session.

    Only the first call configures anything, later calls get the
    already installed session back regardless of their arguments.
    The key is not read here; a bad key shows up on first use.
    """
    global _session

    with _lock:
        if _session is not None:
            return _session

        _session = SshSession(key, passphrase)
        atexit.register(_session.close)
        logger.debug("Configured %r", _session)
        return _session


def reset_ssh():
    """Drop the installed session. Only meant for tests."""
    global _session

    with _lock:
        if _session is not None:
            _session.close()
        _session = None
