import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from rehost.args import get_parser
from rehost.config import RehostConfig
from rehost.discovery import find_git_repositories
from rehost.helpers.file_searcher import generate_search_path_list
from rehost.io import InputOutput
from rehost.probe import check_connection
from rehost.processor import RepoStatus, process_repositories
from rehost.ssh import setup_ssh

CONF_FNAME = ".rehost.conf.yml"


def get_default_config_files():
    # later files win, so the current directory overrides the home directory
    default_config_files = [Path.home() / CONF_FNAME]
    try:
        default_config_files.append(Path(CONF_FNAME).resolve())
    except OSError:
        pass
    return list(dict.fromkeys(map(str, default_config_files)))


def load_dotenv_files(dotenv_fname, encoding="utf-8"):
    dotenv_files = generate_search_path_list(".env", dotenv_fname)
    loaded = []
    for fname in dotenv_files:
        try:
            if Path(fname).exists():
                load_dotenv(fname, override=True, encoding=encoding)
                loaded.append(fname)
        except OSError as e:
            print(f"OSError loading {fname}: {e}")
    return loaded


def setup_logging(verbose):
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(message)s")
    logging.getLogger("git").setLevel(logging.INFO if verbose else logging.WARNING)


def format_summary(counts):
    parts = [f"{counts[status]} {status.value}" for status in RepoStatus if counts[status]]
    return "Done: " + (", ".join(parts) if parts else "nothing to do")


def main(argv=None, output=None, error_output=None):
    if argv is None:
        argv = sys.argv[1:]

    default_config_files = get_default_config_files()
    parser = get_parser(default_config_files)
    parser.prog = "git-rehost"

    # the first pass only finds --env-file, the .env may supply the rest
    args, _ = parser.parse_known_args(argv)
    loaded_dotenvs = load_dotenv_files(args.env_file)
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("rehost")
    for fname in loaded_dotenvs:
        logger.debug("Loaded %s", fname)

    if not args.dir:
        parser.error("the following arguments are required: --dir")
    if not Path(args.dir).expanduser().is_dir():
        parser.error(f"--dir {args.dir} is not a directory")

    io = InputOutput(
        pretty=args.pretty,
        output=output,
        error_output=error_output,
        tool_output_color=args.tool_output_color,
        tool_error_color=args.tool_error_color,
        tool_warning_color=args.tool_warning_color,
    )

    config = RehostConfig.from_args(args)
    logger.debug("%r", config)

    session = setup_ssh(config.key, config.passphrase)
    check_connection(io, session, config.probe_remote, config.to_host)

    def on_walk_error(err):
        io.tool_warning(f"Cannot read {err.filename}: {err.strerror or err}")

    repos = find_git_repositories(config.root, config.skip_dirs, on_error=on_walk_error)
    io.tool_output(f"Found ({len(repos)}) git repositories")

    counts = process_repositories(repos, config, session, io)
    io.tool_output(format_summary(counts))
    return 0


if __name__ == "__main__":
    status = main()
    sys.exit(status)
