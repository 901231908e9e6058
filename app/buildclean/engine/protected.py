"""Protected clean roots that must never be handed to the cleaner.

A misconfigured directory such as ``..`` or ``~`` would otherwise wipe far
more than build output. Roots are compared after resolving, so relative
spellings and links to a protected location are caught as well.
"""

from pathlib import Path

# Locations that are never valid clean roots. Entries starting with ~
# are expanded to the user's home directory.
PROTECTED_ROOTS: tuple[str, ...] = (
    "~",
    "~/.config",
    "~/.local",
    "~/.ssh",
    "/etc",
    "/usr",
    "/var",
    "/bin",
    "/boot",
    "/lib",
    "/opt",
    "/sbin",
)


def _resolve(path: Path) -> Path:
    return path.expanduser().resolve(strict=False)


def is_protected_root(path: Path, base_dir: Path | None = None) -> bool:
    """Check if ``path`` must not be used as a clean root.

    A root is protected when it is a filesystem anchor, one of
    PROTECTED_ROOTS (``~`` expands to the user's home directory), or the
    project base directory or one of its ancestors.

    Args:
        path: Candidate clean root.
        base_dir: Project base directory the root was configured for.

    Returns:
        True if the path is protected.
    """
    resolved = _resolve(path)

    if resolved == Path(resolved.anchor):
        return True

    for pattern in PROTECTED_ROOTS:
        if resolved == _resolve(Path(pattern)):
            return True

    if base_dir is not None:
        base = _resolve(base_dir)
        if resolved == base or resolved in base.parents:
            return True

    return False
