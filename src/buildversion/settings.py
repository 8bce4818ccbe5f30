"""Ambient settings for buildversion.

Command-line parameters describe *what* to stamp; these settings describe
how the tool itself behaves in a given environment (a CI runner wanting
JSON logs, a wrapper script renaming the program in the usage header).

Manifesto:
    Settings should be explicit, validated, and environment-driven, and
    they must never shadow a command-line parameter.

    - **Pydantic validation:** ``log_format`` is checked at startup
    - **Environment-driven:** ``BUILDVERSION_`` prefixed env vars and .env
    - **Extra ignore:** unrelated env vars don't cause startup failures

Examples:
    >>> from buildversion.settings import BuildVersionSettings
    >>> BuildVersionSettings().log_format
    'console'

Tags:
    settings, configuration, pydantic, environment, buildversion

Doc-Types:
    - API Reference
    - Configuration Guide
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BuildVersionSettings(BaseSettings):
    """Environment settings for one buildversion run.

    Fields
    ──────
    log_format   : ``console`` (default) or ``json`` log rendering
    program_name : Name shown in the ``Invocation:`` usage header
    """

    model_config = SettingsConfigDict(
        env_prefix="BUILDVERSION_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_format: Literal["console", "json"] = "console"
    program_name: str = Field(
        default="BuildVersion",
        description="Program name used in usage output",
    )


def get_settings() -> BuildVersionSettings:
    """Load settings from the environment."""
    return BuildVersionSettings()
