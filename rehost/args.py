import argparse

import configargparse

from rehost import __version__
from rehost.config import DEFAULT_FROM_HOST, DEFAULT_TO_HOST
from rehost.probe import DEFAULT_PROBE_REMOTE


def get_parser(default_config_files):
    parser = configargparse.ArgumentParser(
        description="git-rehost moves git remotes from one hosting domain to another",
        add_config_file_help=True,
        default_config_files=default_config_files,
        config_file_parser_class=configargparse.YAMLConfigFileParser,
        auto_env_var_prefix="REHOST_",
    )

    ##########
    group = parser.add_argument_group("Main")
    group.add_argument(
        "--dir",
        metavar="DIR",
        help="Root directory to scan for git repositories (required)",
    )
    group.add_argument(
        "--key",
        metavar="KEY_FILE",
        default=None,
        help="SSH private key used for every remote operation",
    )
    group.add_argument(
        "--pas",
        metavar="PASSPHRASE",
        default="",
        help="Passphrase of the SSH private key (default: none)",
    )

    ##########
    group = parser.add_argument_group("Hosts")
    group.add_argument(
        "--from-host",
        metavar="HOST",
        default=DEFAULT_FROM_HOST,
        help=f"Rewrite remotes whose host contains this text (default: {DEFAULT_FROM_HOST})",
    )
    group.add_argument(
        "--to-host",
        metavar="HOST",
        default=DEFAULT_TO_HOST,
        help=f"Replacement for the --from-host text (default: {DEFAULT_TO_HOST})",
    )
    group.add_argument(
        "--probe-remote",
        metavar="URI",
        default=DEFAULT_PROBE_REMOTE,
        help=(
            "Known-good remote checked before anything else; the run stops if it is"
            f" unreachable (default: {DEFAULT_PROBE_REMOTE})"
        ),
    )

    ##########
    group = parser.add_argument_group("Scanning")
    group.add_argument(
        "--skip-dir",
        action="append",
        metavar="NAME",
        default=None,
        help="Directory name never descended into, can be repeated (default: target)",
    )
    group.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        help="Probe the new remotes but do not change any repository",
    )

    ##########
    group = parser.add_argument_group("Output")
    group.add_argument(
        "--pretty",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Enable/disable colored output (default: True)",
    )
    group.add_argument(
        "--tool-output-color",
        default=None,
        help="Set the color for progress output (default: None)",
    )
    group.add_argument(
        "--tool-error-color",
        default="red",
        help="Set the color for error messages (default: red)",
    )
    group.add_argument(
        "--tool-warning-color",
        default="#FFA500",
        help="Set the color for warning messages (default: #FFA500)",
    )
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Enable verbose output",
    )

    ##########
    group = parser.add_argument_group("Other settings")
    group.add_argument(
        "-c",
        "--config",
        is_config_file=True,
        metavar="CONFIG_FILE",
        help=(
            "Specify the config file (default: .rehost.conf.yml from the home directory and"
            " from the current directory are both read, the current directory wins)"
        ),
    )
    group.add_argument(
        "--env-file",
        metavar="ENV_FILE",
        default=".env",
        help="Specify the .env file to load (default: .env in the current directory)",
    )
    group.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show the version number and exit",
    )

    return parser
