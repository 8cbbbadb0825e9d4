"""Gateway data types: one named invocation in, one outcome out.

All types: @final @dataclass(frozen=True, slots=True), made of plain
strings so the default Temporal payload converter round-trips them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import final


@final
@dataclass(frozen=True, slots=True)
class InvocationInput:
    """A client request routed to the contract.

    timestamp is ISO-8601 with an offset; empty means "host clock".
    """

    operation: str
    caller_id: str
    organization: str
    args: tuple[str, ...] = ()
    timestamp: str = ""


@final
@dataclass(frozen=True, slots=True)
class InvocationOutput:
    """Committed result (canonical JSON) or the error that aborted the invocation."""

    operation: str
    committed: bool
    result_json: str = ""
    error_code: str = ""
    error_message: str = ""
    error: dict[str, str] = field(default_factory=dict)
