from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Sequence, Union

from leasedb.exception import ConfigurationError

Params = Optional[Union[Sequence[Any], Mapping[str, Any]]]


def to_codes(codes: Optional[Iterable[str]]) -> FrozenSet[str]:
    """Normalize a collection of error codes

    A bare string is treated as a single code rather than a sequence of
    characters.
    """
    if not codes:
        return frozenset()
    if isinstance(codes, str):
        return frozenset((codes,))
    normalized = frozenset(codes)
    for code in normalized:
        if not isinstance(code, str):
            raise ConfigurationError(
                f"retry error codes must be strings, got {code!r}"
            )
    return normalized


@dataclass(frozen=True)
class RetryPolicy:
    max_retry_count: int = 0
    retry_error_codes: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if (
            isinstance(self.max_retry_count, bool)
            or not isinstance(self.max_retry_count, int)
            or self.max_retry_count < 0
        ):
            raise ConfigurationError(
                "max_retry_count: must be a non-negative integer"
            )
        object.__setattr__(
            self, "retry_error_codes", to_codes(self.retry_error_codes)
        )

    def retry_codes_for(self, request: QueryRequest) -> FrozenSet[str]:
        return self.retry_error_codes | request.extra_retry_codes


@dataclass(frozen=True)
class QueryRequest:
    text: str
    params: Params = None
    extra_retry_codes: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "extra_retry_codes", to_codes(self.extra_retry_codes)
        )
