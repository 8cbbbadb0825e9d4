"""Storage codecs.

Integers are stored as their decimal-string encoding (UTF-8), never as raw
binary, to stay readable by existing deployed ledgers. Structured values
(history sequences, event payloads) use canonical JSON: sorted keys,
compact separators.
"""

from __future__ import annotations

import dataclasses
import json
import re
from typing import Any

from tokenledger.core.errors import CorruptStateError, ErrorCode, PersistenceError
from tokenledger.core.result import Err, Ok
from tokenledger.core.types import UtcDatetime

# Bounded digit count: stored integers never approach it, and int() of a
# longer string can exceed the interpreter's conversion limit.
_STORED_INT_RE = re.compile(r"-?[0-9]{1,64}")


def encode_int(n: int) -> bytes:
    return str(n).encode("utf-8")


def decode_int(
    raw: bytes, key: str, at: UtcDatetime,
) -> Ok[int] | Err[CorruptStateError]:
    """Decode a stored decimal-string integer."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        return Err(corrupt_state(key, repr(raw), "value is not UTF-8", at))
    if not _STORED_INT_RE.fullmatch(text):
        return Err(corrupt_state(key, text, "value is not a decimal integer", at))
    return Ok(int(text))


def _to_serializable(obj: object) -> Any:  # noqa: PLR0911
    """Recursively convert a value to a JSON-compatible Python value."""
    if obj is None:
        return None
    # bool before int (bool is subclass of int)
    if isinstance(obj, bool):
        return obj
    if isinstance(obj, (int, str)):
        return obj
    if isinstance(obj, UtcDatetime):
        return obj.value.isoformat()
    if isinstance(obj, (tuple, list)):
        return [_to_serializable(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_serializable(v) for k, v in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        to_wire = getattr(obj, "to_wire", None)
        if callable(to_wire):
            return _to_serializable(to_wire())
        return {f.name: _to_serializable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    msg = f"Cannot serialize {type(obj).__name__}"
    raise TypeError(msg)


def canonical_bytes(obj: object) -> Ok[bytes] | Err[str]:
    """Convert a value to canonical JSON bytes. Returns Err on unsupported types."""
    try:
        serializable = _to_serializable(obj)
    except TypeError as e:
        return Err(f"Unsupported type in canonical serialization: {e}")
    return Ok(
        json.dumps(serializable, sort_keys=True, separators=(",", ":")).encode("utf-8")
    )


def decode_json(
    raw: bytes, key: str, at: UtcDatetime,
) -> Ok[Any] | Err[CorruptStateError]:
    try:
        return Ok(json.loads(raw.decode("utf-8")))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        return Err(corrupt_state(key, repr(raw[:64]), f"value is not JSON: {e}", at))


def corrupt_state(key: str, raw: str, detail: str, at: UtcDatetime) -> CorruptStateError:
    return CorruptStateError(
        message=f"Corrupt state at {key!r}: {detail}",
        code=ErrorCode.CORRUPT_STATE.value,
        timestamp=at,
        source="core.serialization",
        key=key,
        raw=raw,
    )


def encode_json(
    obj: object, target: str, at: UtcDatetime,
) -> Ok[bytes] | Err[PersistenceError]:
    """canonical_bytes() with the failure as a PERSISTENCE_ERROR value."""
    match canonical_bytes(obj):
        case Err(detail):
            return Err(PersistenceError(
                message=f"Cannot encode value for {target!r}: {detail}",
                code=ErrorCode.PERSISTENCE_ERROR.value,
                timestamp=at,
                source="core.serialization.encode_json",
                operation="encode",
            ))
        case Ok(payload):
            return Ok(payload)
