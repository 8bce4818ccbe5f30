"""Output artifacts: version stub, assembly metadata patch, plain version file.

Stability: stable
Tier: none
Since: 1.0.0
Dependencies: structlog
Doc-Types: API_REFERENCE
Tags: buildversion, artifacts, codegen

Each writer is best-effort: an ``OSError`` is wrapped in ``ArtifactError``,
logged, and returned on the ``ArtifactResult`` instead of being raised, so
one unwritable path never stops the others.

The version stub is rendered from the file suffix::

    VersionInfo.py  ->  Python module with module-level constants
    VersionInfo.cs  ->  C# ``VersionInfo`` class (also used for any other suffix)
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from buildversion.errors import ArtifactError
from buildversion.logging import get_logger

logger = get_logger(__name__)

GENERATED_BY = "BuildVersion"

# Version("1.2.3") / Version("1.2.3.0") in assembly attributes
ASSEMBLY_VERSION_RE = re.compile(r'Version\("[0-9.]*"\)')


@dataclass
class ArtifactResult:
    """Outcome of one artifact write."""

    name: str
    path: str
    written: bool
    error: ArtifactError | None = None


def _literal(value: str | None) -> str:
    # JSON string escaping is valid for both C# and Python literals
    return json.dumps(value or "")


def _render_csharp(namespace: str, version: str, long_version: str, build_date: str) -> str:
    lines = [
        f"// This file is auto-generated by {GENERATED_BY}",
        f"// Before editting, check out the application's build environment for use of {GENERATED_BY}",
        "using System;",
        f"namespace {namespace or 'UNKNOWN'} {{",
        "    public class VersionInfo {",
        f"        public static string appVersion = {_literal(version)};",
        f"        public static string longVersion = {_literal(long_version)};",
        f"        public static string buildDate = {_literal(build_date)};",
        "    }",
        "}",
    ]
    return "\n".join(lines) + "\n"


def _render_python(namespace: str, version: str, long_version: str, build_date: str) -> str:
    lines = [
        f"# This file is auto-generated by {GENERATED_BY}",
        f"# Before editing, check out the application's build environment for use of {GENERATED_BY}",
        f'"""Version information for {namespace or "UNKNOWN"}."""',
        "",
        f"namespace = {_literal(namespace)}",
        f"app_version = {_literal(version)}",
        f"long_version = {_literal(long_version)}",
        f"build_date = {_literal(build_date)}",
    ]
    return "\n".join(lines) + "\n"


def render_version_file(
    path: str | Path,
    *,
    namespace: str,
    version: str,
    long_version: str,
    build_date: str,
) -> str:
    """Render the version stub contents for ``path``'s language."""
    renderer = _render_python if Path(path).suffix == ".py" else _render_csharp
    return renderer(namespace, version, long_version, build_date)


def _failed(name: str, path: str | Path, exc: OSError | UnicodeError, message: str) -> ArtifactResult:
    error = ArtifactError(message, cause=exc).with_context(path=str(path), artifact=name)
    logger.error("artifact_failed", artifact=name, path=str(path), error=str(exc))
    return ArtifactResult(name=name, path=str(path), written=False, error=error)


def write_version_file(
    path: str | Path,
    *,
    namespace: str,
    version: str,
    long_version: str,
    build_date: str,
) -> ArtifactResult:
    """Write the generated version stub."""
    logger.debug("creating_version_file", path=str(path))
    content = render_version_file(
        path,
        namespace=namespace,
        version=version,
        long_version=long_version,
        build_date=build_date,
    )
    try:
        Path(path).write_text(content, encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        return _failed("version_file", path, exc, f"Exception writing version file {path}")
    return ArtifactResult(name="version_file", path=str(path), written=True)


def update_assembly_file(path: str | Path, version: str) -> ArtifactResult:
    """Replace every ``Version("x.y.z")`` in an existing file with ``Version("<version>.0")``."""
    logger.debug("updating_assembly_file", path=str(path), version=version)
    replacement = f'Version("{version}.0")'
    try:
        original = Path(path).read_text(encoding="utf-8")
        patched, count = ASSEMBLY_VERSION_RE.subn(lambda _m: replacement, original)
        if count:
            Path(path).write_text(patched, encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        return _failed("assembly_info", path, exc, f"Exception writing assembly file {path}")
    if count == 0:
        logger.warning("assembly_version_not_found", path=str(path))
    return ArtifactResult(name="assembly_info", path=str(path), written=count > 0)


def write_app_version(path: str | Path, version: str) -> ArtifactResult:
    """Write the bare application version to a text file."""
    logger.debug("writing_app_version", path=str(path), version=version)
    try:
        Path(path).write_text(version, encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        return _failed("app_version", path, exc, f"Exception writing app version file {path}")
    return ArtifactResult(name="app_version", path=str(path), written=True)


__all__ = [
    "ArtifactResult",
    "render_version_file",
    "write_version_file",
    "update_assembly_file",
    "write_app_version",
]
