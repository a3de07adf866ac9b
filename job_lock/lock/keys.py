"""
Lock identifier derivation.

Identifiers must come out the same in every worker process, so arguments are
encoded as canonical JSON rather than with ``repr()`` or ``hash()``.
"""

import json
from collections.abc import Mapping, Sequence, Set
from enum import Enum
from typing import Any

from job_lock.constants import LOCK_KEY_PREFIX


def normalize_arg(value: Any) -> Any:
    """
    Normalize an argument so equivalent representations encode identically.

    Enum members become the string form of their value, so ``Color.RED`` and
    ``"red"`` yield the same identifier. Containers are normalized recursively;
    sets become lists sorted by their encoded elements, since set iteration
    order changes with the interpreter's hash seed.

    Mapping keys are stringified, matching what a JSON job payload delivers to
    the worker: ``{1: "x"}`` arrives as ``{"1": "x"}``, so both share a lock.

    Args:
        value: A job argument.

    Returns:
        The normalized argument.
    """
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Mapping):
        return {str(normalize_arg(k)): normalize_arg(v) for k, v in value.items()}
    if isinstance(value, Set):
        return sorted((normalize_arg(item) for item in value), key=_encode)
    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [normalize_arg(item) for item in value]
    return value


def _encode(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def resolve_lock_key(
    job_type: str,
    args: Sequence[Any],
    kwargs: Mapping[str, Any] | None = None,
    prefix: str = LOCK_KEY_PREFIX,
) -> str:
    """
    Derive the default lock identifier for a job invocation.

    Keyword arguments, when given, follow the positional array as a separate
    ``-{...}`` segment, so a trailing dict passed positionally never shares a
    lock with the same pairs passed by keyword.

    Args:
        job_type: Canonical name of the job type.
        args: Positional arguments the job will receive.
        kwargs: Keyword arguments the job will receive, if any.
        prefix: Namespace marker separating lock keys from other keys.

    Returns:
        Identifier such as ``lock:update_graph-[42,"full"]`` or
        ``lock:update_graph-[42]-{"force":true}``.

    Example:
        >>> resolve_lock_key("update_graph", (42,))
        'lock:update_graph-[42]'
    """
    key = f"{prefix}{job_type}-{_encode([normalize_arg(arg) for arg in args])}"
    if kwargs:
        key = f"{key}-{_encode(normalize_arg(dict(kwargs)))}"
    return key
