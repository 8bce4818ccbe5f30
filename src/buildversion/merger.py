"""Command-line merging for the parameter store.

Stability: stable
Tier: none
Since: 1.0.0
Dependencies: structlog
Doc-Types: API_REFERENCE, TECHNICAL_DESIGN
Tags: buildversion, cli, params, parser

Applies an argument token list to a ``ParameterStore`` in a single
left-to-right pass.  The only real decision is whether the token after a
flag is that flag's value or the next thing to parse:

- a token starting with ``-`` is never a value (negative numbers are not
  special-cased, so ``--offset -1`` reads ``-1`` as a flag)
- a boolean flag only takes ``true``/``t``/``false``/``f`` as its value;
  anything else is left for the next iteration
- a text flag takes any eligible token verbatim; with none it is a no-op
- ``--noX`` for a boolean field ``X`` assigns ``false`` by default

Architecture::

    tokens ──► merge_command_line ──┬─► consume_flag ──► store.set
                                    ├─► leading operand (first bare token)
                                    └─► trailing greedy capture (rest, CSV)

Usage::

    from buildversion.merger import merge_command_line
    from buildversion.params import BuildParams

    params = merge_command_line(BuildParams(), ["-v", "1.2.3", "--noquiet"])
"""

from __future__ import annotations

from collections.abc import Sequence

from buildversion.errors import UnknownParameterError, UnrecognizedTokenError
from buildversion.logging import get_logger
from buildversion.params import FALSE_TEXT, TRUE_TEXT, ParameterStore

logger = get_logger(__name__)

FLAG_MARKER = "-"
NEGATION_PREFIX = "no"
GREEDY_SEPARATOR = ","

# Accepted explicit values after a boolean flag, normalised
BOOLEAN_TOKENS = {
    "true": TRUE_TEXT,
    "t": TRUE_TEXT,
    "false": FALSE_TEXT,
    "f": FALSE_TEXT,
}


def is_flag(token: str) -> bool:
    """True if the token carries a leading flag marker."""
    return token.startswith(FLAG_MARKER)


def consume_flag(store: ParameterStore, flag: str, next_token: str | None = None) -> int:
    """
    Apply one flag (and possibly its value) to the store.

    Args:
        store: Store to update
        flag: Flag token; leading markers are optional
        next_token: Following token, or None at end of input

    Returns:
        Number of extra tokens consumed beyond ``flag`` (0 or 1).

    Raises:
        UnknownParameterError: If the flag names no field.
    """
    name = flag.lstrip(FLAG_MARKER)

    # --noX on a boolean field X turns it off rather than on
    assumed = TRUE_TEXT
    if len(name) > len(NEGATION_PREFIX) and name[: len(NEGATION_PREFIX)].lower() == NEGATION_PREFIX:
        negated = store.lookup(name[len(NEGATION_PREFIX):])
        if negated is not None and negated.is_boolean:
            assumed = FALSE_TEXT
            name = name[len(NEGATION_PREFIX):]

    eligible = next_token is not None and not is_flag(next_token)

    fd = store.lookup(name)
    if fd is None:
        raise UnknownParameterError(name)

    if fd.is_boolean:
        explicit = BOOLEAN_TOKENS.get(next_token.lower()) if eligible else None
        if explicit is not None:
            value, consumed = explicit, 1
        else:
            value, consumed = assumed, 0
    elif eligible:
        value, consumed = next_token, 1
    else:
        logger.debug("flag_without_value", parameter=fd.name)
        return 0

    store.set(fd.name, value)
    logger.debug("parameter_set", parameter=fd.name, value=value)
    return consumed


def _takes_operand(store: ParameterStore, key: str, token: str) -> bool:
    # Boolean keys only take a literal; unknown keys fall through to consume_flag to raise
    fd = store.lookup(key)
    return fd is None or not fd.is_boolean or token.lower() in BOOLEAN_TOKENS


def merge_command_line(
    store: ParameterStore,
    tokens: Sequence[str],
    leading_operand_key: str | None = None,
    trailing_greedy_key: str | None = None,
) -> ParameterStore:
    """
    Merge command-line tokens into the store.

    Settings applied before a failure stay applied; a store that failed to
    merge should only be used for diagnostics.

    Args:
        store: Store to update in place
        tokens: Argument tokens, in invocation order
        leading_operand_key: If set, a bare first token is the value of this key
            (for a boolean key, only when the token is a boolean literal)
        trailing_greedy_key: If set, the first other bare token and everything
            after it are joined with commas and stored under this key

    Returns:
        The same store, for chaining.

    Raises:
        UnknownParameterError: A flag names no field.
        UnrecognizedTokenError: A bare token has nowhere to go.
    """
    ii = 0
    while ii < len(tokens):
        token = tokens[ii]
        following = tokens[ii + 1] if ii + 1 < len(tokens) else None

        if is_flag(token):
            ii += 1 + consume_flag(store, token, following)
            continue

        if ii == 0 and leading_operand_key and _takes_operand(store, leading_operand_key, token):
            if consume_flag(store, leading_operand_key, token):
                ii += 1
                continue

        if trailing_greedy_key:
            consume_flag(store, trailing_greedy_key, GREEDY_SEPARATOR.join(tokens[ii:]))
            break

        raise UnrecognizedTokenError(token)

    return store


__all__ = [
    "BOOLEAN_TOKENS",
    "consume_flag",
    "is_flag",
    "merge_command_line",
]
