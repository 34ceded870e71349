"""Path helpers for locating the share directory and stream reader files."""

from pathlib import Path

from platformdirs import user_data_dir

LOGSTREAMD_APP_NAME = "logstreamd"
STREAM_READER_SUFFIX = ".toml"


def share_dir() -> Path:
    """Return the default base directory for relative stream reader paths.

    Returns:
        Path to the user data directory for logstreamd.

    Example:
        >>> isinstance(share_dir(), Path)
        True
    """
    return Path(user_data_dir(LOGSTREAMD_APP_NAME))


def prepend_share_dir(value: str | Path, base: str | Path | None = None) -> Path:
    """Resolve ``value`` against the share directory unless it is absolute.

    Args:
        value: Directory as configured.
        base: Share directory override; defaults to ``share_dir()``.

    Returns:
        A normalized path.

    Example:
        >>> prepend_share_dir("logstreamers.d", "/srv/share").as_posix()
        '/srv/share/logstreamers.d'
        >>> prepend_share_dir("/etc/streams/../streams.d", "/srv/share").as_posix()
        '/etc/streams.d'
    """
    path = Path(value).expanduser()
    if not path.is_absolute():
        root = Path(base).expanduser() if base is not None else share_dir()
        path = root / path
    return clean_path(path)


def clean_path(path: Path) -> Path:
    """Lexically normalize a path without touching the filesystem.

    Example:
        >>> clean_path(Path("/a/./b/../c")).as_posix()
        '/a/c'
    """
    parts: list[str] = []
    for part in path.parts:
        if part == ".":
            continue
        if part == ".." and parts:
            if path.anchor and parts[-1] == path.anchor:
                continue
            if parts[-1] != "..":
                parts.pop()
                continue
        parts.append(part)
    if not parts:
        return Path(".")
    return Path(*parts)


def is_stream_reader_file(path: Path) -> bool:
    """Return whether ``path`` has the stream reader file extension.

    Example:
        >>> is_stream_reader_file(Path("web.toml")), is_stream_reader_file(Path("web.toml.bak"))
        (True, False)
    """
    return path.suffix == STREAM_READER_SUFFIX
