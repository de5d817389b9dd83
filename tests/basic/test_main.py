import io
import os
from collections import Counter
from pathlib import Path

import git
import pytest

from rehost.io import InputOutput
from rehost.main import format_summary, load_dotenv_files, main
from rehost.probe import ProbeResult, ProbeStatus
from rehost.processor import RepoStatus
from rehost.ssh import setup_ssh

OLD = "git@bitbucket.org:team/repo.git"
NEW = "git@github.com:team/repo.git"


@pytest.fixture
def outputs():
    return io.StringIO(), io.StringIO()


@pytest.fixture
def remote_probe(mocker):
    return mocker.patch(
        "rehost.processor.probe_remote", return_value=ProbeResult(ProbeStatus.OK)
    )


def _run(argv, outputs):
    out, err = outputs
    return main(argv, output=out, error_output=err)


def test_rewrites_remotes_under_dir(tmp_path, make_repo, bare_remote, outputs, remote_probe):
    proj = make_repo("work/proj", {"origin": OLD})
    make_repo("work/proj/target/sub", {"origin": OLD})
    clean = make_repo("work/clean", {"origin": NEW})

    status = _run(["--dir", str(tmp_path / "work"), "--probe-remote", str(bare_remote)], outputs)

    assert status == 0
    with git.Repo(proj) as repo:
        assert repo.remote("origin").url == NEW
    with git.Repo(clean) as repo:
        assert repo.remote("origin").url == NEW

    out = outputs[0].getvalue()
    assert "Found (2) git repositories" in out
    assert "Done: 1 clean, 1 updated" in out


def test_connection_failure_stops_the_run(tmp_path, make_repo, outputs, mocker):
    make_repo("work/proj", {"origin": OLD})
    processed = mocker.patch("rehost.main.process_repositories")

    with pytest.raises(SystemExit) as exc:
        _run(["--dir", str(tmp_path / "work"), "--probe-remote", str(tmp_path / "nope")], outputs)

    assert exc.value.code == 1
    assert "Access to github.com failed" in outputs[1].getvalue()
    processed.assert_not_called()


def test_key_and_passphrase_reach_the_session(tmp_path, bare_remote, outputs, mocker):
    (tmp_path / "work").mkdir()
    setup = mocker.patch("rehost.main.setup_ssh", wraps=setup_ssh)

    _run(
        [
            "--dir",
            str(tmp_path / "work"),
            "--key",
            str(tmp_path / "id_ed25519"),
            "--pas",
            "letmein",
            "--probe-remote",
            str(bare_remote),
        ],
        outputs,
    )

    setup.assert_called_once_with(tmp_path / "id_ed25519", "letmein")


def test_dir_is_required(outputs):
    with pytest.raises(SystemExit) as exc:
        _run([], outputs)

    assert exc.value.code == 2


def test_dir_must_be_a_directory(tmp_path, outputs):
    with pytest.raises(SystemExit) as exc:
        _run(["--dir", str(tmp_path / "missing")], outputs)

    assert exc.value.code == 2


def test_settings_from_environment(tmp_path, make_repo, bare_remote, outputs, remote_probe):
    proj = make_repo("work/proj", {"origin": "git@old.example.com:team/repo.git"})
    os.environ["REHOST_DIR"] = str(tmp_path / "work")
    os.environ["REHOST_FROM_HOST"] = "old.example.com"
    os.environ["REHOST_TO_HOST"] = "new.example.com"
    os.environ["REHOST_PROBE_REMOTE"] = str(bare_remote)

    assert _run([], outputs) == 0

    with git.Repo(proj) as repo:
        assert repo.remote("origin").url == "git@new.example.com:team/repo.git"


def test_settings_from_dotenv(tmp_path, make_repo, bare_remote, outputs, remote_probe):
    proj = make_repo("work/proj", {"origin": OLD})
    Path(".env").write_text(
        f"REHOST_DIR={tmp_path / 'work'}\nREHOST_PROBE_REMOTE={bare_remote}\n"
    )

    assert _run([], outputs) == 0

    with git.Repo(proj) as repo:
        assert repo.remote("origin").url == NEW


def test_settings_from_config_file(tmp_path, make_repo, bare_remote, outputs, remote_probe):
    proj = make_repo("work/proj", {"origin": "git@gitlab.com:team/repo.git"})
    Path(".rehost.conf.yml").write_text(
        f"from-host: gitlab.com\nprobe-remote: {bare_remote}\ndry-run: true\n"
    )

    assert _run(["--dir", str(tmp_path / "work")], outputs) == 0

    with git.Repo(proj) as repo:
        assert repo.remote("origin").url == "git@gitlab.com:team/repo.git"
    assert "would change origin to git@github.com:team/repo.git" in outputs[0].getvalue()


def test_load_dotenv_files_reports_loaded(tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("REHOST_SOMETHING=1\n")

    loaded = load_dotenv_files(str(env_file))

    assert loaded == [str(env_file.resolve())]
    assert os.environ["REHOST_SOMETHING"] == "1"


def test_format_summary():
    counts = Counter({RepoStatus.UPDATED: 2, RepoStatus.FAILED: 1})

    assert format_summary(counts) == "Done: 2 updated, 1 failed"
    assert format_summary(Counter()) == "Done: nothing to do"


def test_tool_colors_reach_the_console(tmp_path, bare_remote, outputs, mocker):
    (tmp_path / "work").mkdir()
    io_cls = mocker.patch("rehost.main.InputOutput", wraps=InputOutput)

    _run(
        [
            "--dir",
            str(tmp_path / "work"),
            "--tool-output-color",
            "blue",
            "--tool-error-color",
            "magenta",
            "--probe-remote",
            str(bare_remote),
        ],
        outputs,
    )

    kwargs = io_cls.call_args.kwargs
    assert kwargs["tool_output_color"] == "blue"
    assert kwargs["tool_error_color"] == "magenta"


def test_current_directory_config_wins_over_home(
    tmp_path, make_repo, bare_remote, outputs, remote_probe
):
    proj = make_repo("work/proj", {"origin": "git@gitlab.com:team/repo.git"})
    (Path.home() / ".rehost.conf.yml").write_text(
        f"from-host: gitlab.com\nto-host: codeberg.org\nprobe-remote: {bare_remote}\n"
    )
    Path(".rehost.conf.yml").write_text("to-host: github.com\n")

    assert _run(["--dir", str(tmp_path / "work")], outputs) == 0

    with git.Repo(proj) as repo:
        assert repo.remote("origin").url == "git@github.com:team/repo.git"
