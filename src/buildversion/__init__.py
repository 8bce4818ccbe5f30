"""buildversion: stamp version, build date and git revision into build artifacts.

Stability: stable
Tier: none
Since: 1.0.0
Dependencies: structlog, pydantic-settings
Doc-Types: API_REFERENCE, TECHNICAL_DESIGN
Tags: buildversion, versioning, build, tooling

Usage::

    from buildversion import BuildParams, BuildVersion, merge_command_line

    params = merge_command_line(BuildParams(), ["-v", "1.2.3", "-ib", "--print"])
    info = BuildVersion(params).run()
    info.long_version      # '1.2.4-20261017-abcdef01'
"""

from __future__ import annotations

from buildversion._version import __version__
from buildversion.errors import BuildVersionError, ParameterError
from buildversion.merger import merge_command_line
from buildversion.params import (
    BUILD_VERSION_SCHEMA,
    BuildParams,
    FieldDescriptor,
    ParameterSchema,
    ParameterStore,
    ValueType,
    usage_text,
)
from buildversion.resolver import BuildVersion, VersionInfo

__all__ = [
    "__version__",
    "BUILD_VERSION_SCHEMA",
    "BuildParams",
    "BuildVersion",
    "BuildVersionError",
    "FieldDescriptor",
    "ParameterError",
    "ParameterSchema",
    "ParameterStore",
    "ValueType",
    "VersionInfo",
    "merge_command_line",
    "usage_text",
]
