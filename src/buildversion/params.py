"""Declarative parameter schema and value store.

Manifesto:
    The tool's configuration is declared once, as data.  Command-line
    parsing, name-based get/set and the usage listing are all derived
    from the same ordered table of field descriptors, so adding a field
    is a one-line change.

Every field is either text or boolean.  Values are coerced through a
single two-case function (``coerce_value``) that reports success or
failure explicitly.  The store decides what to do with a failure:

- lenient (default): store the type's zero value and log
  ``coercion_failed``.  This matches what existing build scripts rely on,
  but it hides typos such as ``--print yes``, which is a latent
  correctness risk.
- strict: raise ``InvalidParameterValueError``.

Tags:
    buildversion, params, schema, configuration

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from buildversion.errors import InvalidParameterValueError, SchemaError, UnknownParameterError
from buildversion.logging import get_logger

logger = get_logger(__name__)

TRUE_TEXT = "true"
FALSE_TEXT = "false"

Value = str | bool | None


class ValueType(Enum):
    """Value type of a parameter field."""

    TEXT = "text"
    BOOLEAN = "boolean"

    @property
    def zero_value(self) -> str | bool:
        return False if self is ValueType.BOOLEAN else ""


@dataclass(frozen=True)
class FieldDescriptor:
    """Definition of one parameter field."""

    name: str
    value_type: ValueType
    description: str = ""
    alias: str | None = None
    default: Value = None

    @property
    def is_boolean(self) -> bool:
        return self.value_type is ValueType.BOOLEAN

    def matches_name(self, key: str) -> bool:
        return self.name.lower() == key.lower()

    def matches_alias(self, key: str) -> bool:
        return self.alias is not None and self.alias.lower() == key.lower()


def coerce_value(value_type: ValueType, raw: Any) -> tuple[bool, Value]:
    """
    Coerce a raw value into ``value_type``.

    Returns:
        (ok, value). ``value`` is meaningful only when ``ok`` is True.
    """
    if value_type is ValueType.BOOLEAN:
        if isinstance(raw, bool):
            return True, raw
        if isinstance(raw, str):
            lowered = raw.lower()
            if lowered == TRUE_TEXT:
                return True, True
            if lowered == FALSE_TEXT:
                return True, False
        return False, None

    # Text: None means "absent" for optional fields
    if raw is None or isinstance(raw, str):
        return True, raw
    if isinstance(raw, bool):
        return True, format_value(raw)
    return True, str(raw)


def format_value(value: Value) -> str:
    """Render a stored value as text (``true``/``false`` for booleans, '' for absent)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return TRUE_TEXT if value else FALSE_TEXT
    return value


class ParameterSchema:
    """
    Ordered, immutable set of field descriptors.

    Raises:
        SchemaError: If names or aliases collide, or a default does not
            match its field's type.
    """

    def __init__(self, fields: Iterable[FieldDescriptor]):
        self._fields = tuple(fields)
        self._validate()

    def _validate(self) -> None:
        names: set[str] = set()
        aliases: set[str] = set()
        for fd in self._fields:
            key = fd.name.lower()
            if not key:
                raise SchemaError("Parameter names must not be empty")
            if key in names:
                raise SchemaError(f"Duplicate parameter name: {fd.name}")
            names.add(key)
            if fd.alias is not None:
                alias = fd.alias.lower()
                if alias in aliases:
                    raise SchemaError(f"Duplicate parameter alias: {fd.alias}")
                aliases.add(alias)
            if fd.default is None:
                continue
            ok, _ = coerce_value(fd.value_type, fd.default)
            if not ok:
                raise SchemaError(f"Default for {fd.name} is not a valid {fd.value_type.value} value")

        clashes = names & aliases
        if clashes:
            raise SchemaError(f"Aliases collide with parameter names: {', '.join(sorted(clashes))}")

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def lookup(self, name_or_alias: str) -> FieldDescriptor | None:
        """Find a field by canonical name, then by alias (case-insensitive)."""
        for fd in self._fields:
            if fd.matches_name(name_or_alias):
                return fd
        for fd in self._fields:
            if fd.matches_alias(name_or_alias):
                return fd
        return None

    def describe_all(self) -> list[tuple[str, str]]:
        """(name, description) pairs in schema order."""
        return [(fd.name, fd.description) for fd in self._fields]


class ParameterStore:
    """
    Current values for every field of a schema.

    Always fully populated: construction and ``reset()`` load every default.
    Not thread-safe; one store belongs to one run.
    """

    def __init__(self, schema: ParameterSchema, *, strict: bool = False):
        self.schema = schema
        self.strict = strict
        self._values: dict[str, Value] = {}
        self.reset()

    def reset(self) -> None:
        """Restore every field to its documented default."""
        self._values = {}
        for fd in self.schema:
            _, value = coerce_value(fd.value_type, fd.default)
            if fd.is_boolean and value is None:
                value = False
            self._values[fd.name] = value

    def lookup(self, name_or_alias: str) -> FieldDescriptor | None:
        return self.schema.lookup(name_or_alias)

    def value(self, name: str) -> Value:
        """Typed current value of a field."""
        fd = self.lookup(name)
        if fd is None:
            raise UnknownParameterError(name)
        return self._values[fd.name]

    def get(self, name: str) -> str:
        """Current value rendered as text; '' for unknown names."""
        fd = self.lookup(name)
        if fd is None:
            return ""
        return format_value(self._values[fd.name])

    def set(self, name: str, raw_value: Any) -> bool:
        """
        Coerce and store a value.

        Returns:
            False if no field matches ``name``, True otherwise.

        Raises:
            InvalidParameterValueError: Only for strict stores, when the
                value cannot be coerced.
        """
        fd = self.lookup(name)
        if fd is None:
            return False

        ok, value = coerce_value(fd.value_type, raw_value)
        if not ok:
            if self.strict:
                raise InvalidParameterValueError(fd.name, raw_value)
            logger.warning(
                "coercion_failed",
                parameter=fd.name,
                value=raw_value,
                stored=fd.value_type.zero_value,
            )
            value = fd.value_type.zero_value

        self._values[fd.name] = value
        return True

    def describe_all(self) -> list[tuple[str, str]]:
        return self.schema.describe_all()

    def as_dict(self) -> dict[str, Value]:
        return dict(self._values)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.lookup(name) is not None

    def __repr__(self) -> str:
        values = ", ".join(f"{k}={v!r}" for k, v in self._values.items())
        return f"{self.__class__.__name__}({values})"


# =============================================================================
# buildversion schema
# =============================================================================


BUILD_VERSION_SCHEMA = ParameterSchema([
    # General input and output
    FieldDescriptor("NameSpace", ValueType.TEXT,
                    "Namespace is set in the output file", alias="ns", default="BuildVersion"),
    FieldDescriptor("Version", ValueType.TEXT,
                    "Version to set. Expected to be formatted as num.num.num", alias="v", default=""),
    FieldDescriptor("VersionFile", ValueType.TEXT,
                    "Version file to write. Default is 'VersionInfo'", alias="f", default="VersionInfo"),
    FieldDescriptor("AssemblyInfoFile", ValueType.TEXT,
                    "If specified, update the version info in AssemblyInfo.cs", alias="a"),
    FieldDescriptor("GitDir", ValueType.TEXT,
                    "Git directory. Default is './.git'", default="./.git"),
    FieldDescriptor("BuildDate", ValueType.TEXT,
                    "Build date if need to be set. Format: 'YYYYMMDD'. Default is today"),
    FieldDescriptor("LongVersion", ValueType.TEXT,
                    "Long version. Default is built"),
    FieldDescriptor("Print", ValueType.BOOLEAN,
                    "Don't write version file but print version info", alias="p", default=False),
    FieldDescriptor("IncrementBuild", ValueType.BOOLEAN,
                    "Increment the build part of the version", alias="ib", default=False),
    FieldDescriptor("WriteAppVersion", ValueType.TEXT,
                    "Write the final application version to this file"),
    # Debugging
    FieldDescriptor("Quiet", ValueType.BOOLEAN,
                    "supress as much informational output as possible", default=False),
    FieldDescriptor("Verbose", ValueType.BOOLEAN,
                    "enable DEBUG information logging", default=False),
])


def _field_property(name: str) -> property:
    def getter(self: ParameterStore) -> Any:
        return self._values[name]

    def setter(self: ParameterStore, value: Any) -> None:
        self.set(name, value)

    return property(getter, setter, doc=f"Typed accessor for {name}")


class BuildParams(ParameterStore):
    """Parameter store bound to the buildversion schema."""

    def __init__(self, *, strict: bool = False):
        super().__init__(BUILD_VERSION_SCHEMA, strict=strict)

    namespace = _field_property("NameSpace")
    version = _field_property("Version")
    version_file = _field_property("VersionFile")
    assembly_info_file = _field_property("AssemblyInfoFile")
    git_dir = _field_property("GitDir")
    build_date = _field_property("BuildDate")
    long_version = _field_property("LongVersion")
    print_only = _field_property("Print")
    increment_build = _field_property("IncrementBuild")
    write_app_version = _field_property("WriteAppVersion")
    quiet = _field_property("Quiet")
    verbose = _field_property("Verbose")


# =============================================================================
# Help text
# =============================================================================


def usage_text(store: ParameterStore, program: str = "BuildVersion") -> str:
    """Generate the invocation listing for every field in schema order."""
    lines = [
        f"Invocation: {program} <parameters>",
        "   Possible parameters are (negate bool parameters by prepending 'no'):",
    ]
    for fd in store.schema:
        alias_str = f", -{fd.alias}" if fd.alias else ""
        default_text = format_value(fd.default)
        default_str = f" [default: {default_text}]" if default_text else ""
        lines.append(
            f"  --{fd.name}{alias_str} ({fd.value_type.value}): {fd.description}{default_str}"
        )
    return "\n".join(lines) + "\n"


__all__ = [
    "ValueType",
    "FieldDescriptor",
    "ParameterSchema",
    "ParameterStore",
    "BuildParams",
    "BUILD_VERSION_SCHEMA",
    "coerce_value",
    "format_value",
    "usage_text",
]
