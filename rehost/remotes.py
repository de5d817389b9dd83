import configparser
import logging
import re
from typing import List, NamedTuple, Optional

import git

logger = logging.getLogger(__name__)

ANY_GIT_ERROR = [
    git.exc.ODBError,
    git.exc.GitError,
    git.exc.InvalidGitRepositoryError,
    git.exc.GitCommandNotFound,
    git.exc.NoSuchPathError,
]
ANY_GIT_ERROR += [
    OSError,
    IndexError,
    BufferError,
    TypeError,
    ValueError,
    AttributeError,
    AssertionError,
    TimeoutError,
]
ANY_GIT_ERROR = tuple(ANY_GIT_ERROR)

# scheme://[user[:password]@]host[:port]/path
URL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*://(?:[^@/]*@)?(\[[^\]]*\]|[^:/?#]*)")

# [user@]host:path, the scp-like syntax git accepts for ssh
SCP_RE = re.compile(r"^(?:[^@/:]+@)?([^@/:]+):(?!//)")

ERE_SPECIAL = set(".[]()*+?{}|^$\\")


class Remote(NamedTuple):
    name: str
    uri: str
    # the value as written in the config, before url.<base>.insteadOf
    config_uri: Optional[str] = None


def parse_host(uri: str) -> Optional[str]:
    """Return the host part of a git remote URI, or None for local paths."""
    match = URL_RE.match(uri)
    if match:
        return match.group(1).strip("[]") or None

    match = SCP_RE.match(uri)
    if match:
        host = match.group(1)
        # c:\path or c:/path on windows is a drive, not a host
        if len(host) == 1 and host.isalpha():
            return None
        return host

    return None


def host_matches(uri: str, pattern: str) -> bool:
    host = parse_host(uri)
    return host is not None and pattern in host


def configured_urls(repo: git.Repo, name: str) -> List[str]:
    """The `remote.<name>.url` values exactly as they are written in the config."""
    reader = repo.config_reader()
    try:
        return [str(url) for url in reader.get_values(f'remote "{name}"', "url")]
    except (KeyError, configparser.NoSectionError, configparser.NoOptionError):
        return []
    finally:
        reader.release()


def find_dirty_remotes(repo: git.Repo, from_host: str) -> List[Remote]:
    """Remotes with a URL whose host contains `from_host`.

    Each remote shows up at most once, with its first matching URL.
    Hosts are matched on the URL git actually connects to, i.e. after
    insteadOf rewriting, and the configured value is kept alongside.
    """
    remotes = []
    for remote in repo.remotes:
        urls = list(remote.urls)
        config_urls = configured_urls(repo, remote.name)
        if len(config_urls) != len(urls):
            config_urls = urls
        for uri, config_uri in zip(urls, config_urls):
            if host_matches(uri, from_host):
                remotes.append(Remote(remote.name, uri, config_uri))
                break
    return remotes


def rewrite_uri(uri: str, from_host: str, to_host: str) -> str:
    # plain substring replacement over the whole URI, path included
    return uri.replace(from_host, to_host)


def ere_escape(text: str) -> str:
    """Escape `text` for the POSIX extended regex git matches old URLs with."""
    return "^" + "".join("\\" + c if c in ERE_SPECIAL else c for c in text) + "$"


def set_remote(repo: git.Repo, remote: Remote, old_uri: Optional[str] = None):
    """Point `remote.name` at `remote.uri`.

    `old_uri` is the configured value to replace; without it git replaces
    the first URL. git appends instead of replacing when `old_uri` matches
    nothing, so an `old_uri` missing from the config raises ValueError
    before anything is written.
    """
    args = [remote.uri]
    if old_uri:
        if old_uri not in configured_urls(repo, remote.name):
            raise ValueError(f"{old_uri} is not a configured url of {remote.name}")
        args.append(ere_escape(old_uri))
    repo.remote(remote.name).set_url(*args)

    urls = configured_urls(repo, remote.name)
    if remote.uri not in urls or (old_uri and old_uri != remote.uri and old_uri in urls):
        raise ValueError(f"{remote.name} urls are now {urls}, expected {old_uri} to be replaced")
    logger.debug("Set %s to %s in %s", remote.name, remote.uri, repo.git_dir)
