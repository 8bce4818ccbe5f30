"""Read the current revision from a git metadata directory.

Stability: stable
Tier: none
Since: 1.0.0
Dependencies: structlog
Doc-Types: API_REFERENCE
Tags: buildversion, git, revision

Reads files directly instead of shelling out to ``git``, so a build
container without git installed can still stamp versions::

    <git_dir>/HEAD            "ref: refs/heads/main"  or a detached SHA
    <git_dir>/refs/heads/main loose ref, one SHA
    <git_dir>/packed-refs     "<sha> <ref>" lines, used when the loose ref is gone

Every failure is logged and reported as ``None``; the caller decides
whether a missing revision is fatal.
"""

from __future__ import annotations

import re
from pathlib import Path

from buildversion.logging import get_logger

logger = get_logger(__name__)

HEAD_FILE = "HEAD"
PACKED_REFS_FILE = "packed-refs"
REF_PREFIX = "ref:"
MIN_REVISION_LENGTH = 8

_REVISION_RE = re.compile(r"[0-9a-fA-F]+")


def _read_loose_ref(git_dir: Path, ref: str) -> str | None:
    ref_file = git_dir / ref
    if not ref_file.is_file():
        return None
    return ref_file.read_text(encoding="utf-8").strip()


def _read_packed_ref(git_dir: Path, ref: str) -> str | None:
    packed = git_dir / PACKED_REFS_FILE
    if not packed.is_file():
        return None
    for line in packed.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        # Comments and peeled-tag lines
        if not line or line.startswith(("#", "^")):
            continue
        parts = line.split(" ", 1)
        if len(parts) == 2 and parts[1].strip() == ref:
            return parts[0]
    return None


def read_revision(git_dir: str | Path) -> str | None:
    """
    Return the full revision identifier HEAD points at.

    Args:
        git_dir: Repository metadata directory (usually ``./.git``)

    Returns:
        Identifier of at least 8 hex characters, or None if HEAD or the ref
        it names cannot be read, or the content is malformed.
    """
    git_path = Path(git_dir)
    head_file = git_path / HEAD_FILE

    try:
        head = head_file.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeError) as exc:
        logger.error("git_head_unreadable", path=str(head_file), error=str(exc))
        return None

    if head.startswith(REF_PREFIX):
        ref = head[len(REF_PREFIX):].strip()
        try:
            revision = _read_loose_ref(git_path, ref) or _read_packed_ref(git_path, ref)
        except (OSError, UnicodeError) as exc:
            logger.error("git_ref_unreadable", ref=ref, path=str(git_path / ref), error=str(exc))
            return None
        if revision is None:
            logger.error("git_ref_missing", ref=ref, path=str(git_path / ref))
            return None
    else:
        revision = head

    if len(revision) < MIN_REVISION_LENGTH or not _REVISION_RE.fullmatch(revision):
        logger.error("git_revision_malformed", revision=revision, path=str(head_file))
        return None

    logger.debug("git_revision_read", revision=revision)
    return revision


__all__ = ["read_revision", "MIN_REVISION_LENGTH"]
