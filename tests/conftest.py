import io
import os
import platform

import git
import pytest

from rehost.config import RehostConfig
from rehost.io import InputOutput
from rehost.ssh import reset_ssh, setup_ssh


@pytest.fixture(autouse=True)
def test_env(mocker, tmp_path, monkeypatch):
    """Isolate every test from the user's environment.

    - fake home directory so ~/.rehost.conf.yml and ~/.env are not read
    - temporary working directory
    - no REHOST_* variables leaking in from the outer shell
    - a fresh SSH session per test
    """
    home = tmp_path / "home"
    home.mkdir()
    cwd = tmp_path / "cwd"
    cwd.mkdir()

    env = {k: v for k, v in os.environ.items() if not k.startswith("REHOST_")}
    if platform.system() == "Windows":
        env["USERPROFILE"] = str(home)
    else:
        env["HOME"] = str(home)
    env["GIT_CONFIG_NOSYSTEM"] = "1"
    mocker.patch.dict(os.environ, env, clear=True)
    monkeypatch.chdir(cwd)

    reset_ssh()
    yield
    reset_ssh()


@pytest.fixture
def make_repo(tmp_path):
    """Factory for a working copy with the given remotes.

    `remotes` maps a remote name to a URL or a list of URLs.
    """

    def _make_repo(path, remotes=None):
        path = tmp_path / path
        path.mkdir(parents=True, exist_ok=True)
        repo = git.Repo.init(path)
        for name, urls in (remotes or {}).items():
            if isinstance(urls, str):
                urls = [urls]
            remote = repo.create_remote(name, urls[0])
            for url in urls[1:]:
                remote.add_url(url)
        repo.close()
        return path

    return _make_repo


@pytest.fixture
def bare_remote(tmp_path):
    """A reachable, empty bare repository."""
    path = tmp_path / "server" / "team" / "repo.git"
    path.mkdir(parents=True)
    git.Repo.init(path, bare=True).close()
    return path


@pytest.fixture
def console():
    return InputOutput(pretty=False, output=io.StringIO(), error_output=io.StringIO())


@pytest.fixture
def session():
    return setup_ssh()


@pytest.fixture
def config(tmp_path):
    return RehostConfig(root=tmp_path)


