"""Resolve the build version and publish it.

Manifesto:
    One linear pass with no retries: validate the version, optionally bump
    the build number, read the revision, compose the long version, then
    either print it or write the artifacts.  Anything that would produce a
    wrong version is fatal and happens before the first write; a failed
    artifact is logged and its siblings are still written.

Architecture:
    ::

        BuildParams ──► BuildVersion.run()
                          │
                          ├─ split_version / increment_build_number
                          ├─ revision_source(git_dir)      (buildversion.git)
                          ├─ compose long version
                          └─ print  |  write_version_file
                                       update_assembly_file
                                       write_app_version   (buildversion.artifacts)

Tags:
    buildversion, resolver, orchestration

Doc-Types:
    - API Reference
    - Technical Design
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, TextIO

from buildversion._version import PROJECT_URL, __version__
from buildversion.artifacts import (
    ArtifactResult,
    update_assembly_file,
    write_app_version,
    write_version_file,
)
from buildversion.errors import BuildNumberError, RevisionError, VersionFormatError
from buildversion.git import read_revision
from buildversion.logging import get_logger
from buildversion.params import BuildParams

BUILD_DATE_FORMAT = "%Y%m%d"
SHORT_REVISION_LENGTH = 8

RevisionSource = Callable[[str | Path], str | None]


def utcnow() -> datetime:
    """Return timezone-aware UTC datetime."""
    return datetime.now(UTC)


@dataclass
class VersionInfo:
    """Everything one run resolved, plus what it wrote."""

    version: str
    long_version: str
    build_date: str
    revision: str
    printed: bool = False
    artifacts: list[ArtifactResult] = field(default_factory=list)

    @property
    def failed_artifacts(self) -> list[ArtifactResult]:
        return [a for a in self.artifacts if a.error is not None]


def split_version(version: str) -> list[str]:
    """
    Split ``major.minor.build`` into its three components.

    Raises:
        VersionFormatError: If there are not exactly three components.
    """
    parts = version.split(".")
    if len(parts) != 3:
        raise VersionFormatError(version)
    return parts


def increment_build_number(version: str) -> str:
    """
    Return ``version`` with the third component increased by one.

    Raises:
        VersionFormatError: Not a three-part version.
        BuildNumberError: Third component is not an integer.
    """
    parts = split_version(version)
    try:
        build = int(parts[2])
    except ValueError as exc:
        raise BuildNumberError(
            version,
            f"Build number is not numeric: {parts[2]!r} in version {version}",
            cause=exc,
        ) from exc
    parts[2] = str(build + 1)
    return ".".join(parts)


def compose_long_version(version: str, build_date: str, revision: str) -> str:
    """``<version>-<build date>-<first 8 revision chars>``."""
    return f"{version}-{build_date}-{revision[:SHORT_REVISION_LENGTH]}"


class BuildVersion:
    """
    Version resolver for one run.

    Args:
        params: Merged parameters; updated in place with the resolved
            Version, BuildDate and LongVersion.
        log: Logger capability (structlog-style bound logger)
        revision_source: Returns the revision for a git dir, or None
        clock: Returns "now"; the build date is taken from it in UTC
        out: Stream for ``Print`` output (stdout when None)
    """

    def __init__(
        self,
        params: BuildParams,
        log: Any = None,
        *,
        revision_source: RevisionSource = read_revision,
        clock: Callable[[], datetime] = utcnow,
        out: TextIO | None = None,
    ):
        self.params = params
        self.log = log if log is not None else get_logger(__name__)
        self.revision_source = revision_source
        self.clock = clock
        self.out = out

    def run(self) -> VersionInfo:
        """
        Resolve the version and print it or write the artifacts.

        Raises:
            VersionFormatError: Version is not ``num.num.num``.
            BuildNumberError: IncrementBuild with a non-numeric build number.
            RevisionError: The git revision could not be read.
        """
        self.log.info("buildversion_started", tool_version=__version__, url=PROJECT_URL)

        try:
            split_version(self.params.version or "")
        except VersionFormatError:
            self.log.error("bad_version_format", version=self.params.version)
            raise

        self.optionally_increment_build_number()
        revision = self.get_git_version()

        if self.params.build_date is None:
            self.params.build_date = self.clock().astimezone(UTC).strftime(BUILD_DATE_FORMAT)

        if self.params.long_version is None:
            self.params.long_version = compose_long_version(
                self.params.version, self.params.build_date, revision
            )

        info = VersionInfo(
            version=self.params.version,
            long_version=self.params.long_version,
            build_date=self.params.build_date,
            revision=revision,
        )

        if self.params.print_only:
            print(info.long_version, file=self.out)
            info.printed = True
        else:
            info.artifacts = self.write_artifacts()

        self.log.info(
            "version_resolved",
            version=info.version,
            long_version=info.long_version,
            artifacts_failed=len(info.failed_artifacts),
        )
        return info

    def optionally_increment_build_number(self) -> None:
        if not self.params.increment_build:
            return
        try:
            self.params.version = increment_build_number(self.params.version)
        except BuildNumberError as exc:
            self.log.error("increment_build_failed", version=self.params.version, error=exc.message)
            raise
        self.log.debug("build_number_incremented", version=self.params.version)

    def get_git_version(self) -> str:
        """
        Fetch the full revision HEAD points at.

        Raises:
            RevisionError: If the revision source returns nothing.
        """
        git_dir = self.params.git_dir
        if not git_dir:
            raise RevisionError("gitDir not specified in app parameters").with_context(parameter="GitDir")

        revision = self.revision_source(git_dir)
        if revision is None:
            raise RevisionError(f"Cannot read git revision from {git_dir}").with_context(path=str(git_dir))
        return revision

    def write_artifacts(self) -> list[ArtifactResult]:
        """Attempt each configured artifact; failures don't stop the rest."""
        results: list[ArtifactResult] = []
        params = self.params

        if params.version_file:
            results.append(
                write_version_file(
                    params.version_file,
                    namespace=params.namespace,
                    version=params.version,
                    long_version=params.long_version,
                    build_date=params.build_date,
                )
            )
        if params.assembly_info_file:
            results.append(update_assembly_file(params.assembly_info_file, params.version))
        if params.write_app_version:
            results.append(write_app_version(params.write_app_version, params.version))

        return results


__all__ = [
    "BuildVersion",
    "VersionInfo",
    "split_version",
    "increment_build_number",
    "compose_long_version",
]
