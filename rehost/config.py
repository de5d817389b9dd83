from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from rehost.discovery import BUILD_OUTPUT_DIRS
from rehost.probe import DEFAULT_PROBE_REMOTE

DEFAULT_FROM_HOST = "bitbucket.org"
DEFAULT_TO_HOST = "github.com"


@dataclass(frozen=True)
class RehostConfig:
    """Run parameters, fixed once the command line is parsed."""

    root: Path
    key: Optional[Path] = None
    passphrase: str = field(default="", repr=False)
    from_host: str = DEFAULT_FROM_HOST
    to_host: str = DEFAULT_TO_HOST
    probe_remote: str = DEFAULT_PROBE_REMOTE
    skip_dirs: Tuple[str, ...] = BUILD_OUTPUT_DIRS
    dry_run: bool = False

    @classmethod
    def from_args(cls, args):
        return cls(
            root=Path(args.dir).expanduser(),
            key=Path(args.key).expanduser() if args.key else None,
            passphrase=args.pas or "",
            from_host=args.from_host,
            to_host=args.to_host,
            probe_remote=args.probe_remote,
            skip_dirs=tuple(args.skip_dir or BUILD_OUTPUT_DIRS),
            dry_run=args.dry_run,
        )
