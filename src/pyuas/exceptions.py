"""Custom exception hierarchy for pyuas."""

from __future__ import annotations


class UasError(Exception):
    """Base exception for all pyuas errors."""


class UasConfigError(UasError):
    """Invalid or missing configuration (e.g. a battery with zero cells)."""


class UasCodecError(UasError):
    """Encoding or decoding of a protocol message failed."""


class UasLinkError(UasError):
    """Transport-level failure inside a bundled link implementation."""

    def __init__(self, message: str, *, link_id: str = "") -> None:
        self.link_id = link_id
        super().__init__(message)


class UasDispatchError(UasError):
    """An outbound message could not be delivered.

    Dispatch failures are normally *returned* as part of a
    :class:`pyuas.models.commands.DispatchResult`.  This exception is only
    raised when a caller opts in via ``DispatchResult.raise_for_failure()``.
    """

    def __init__(
        self,
        message: str,
        *,
        link_id: str | None = None,
        failures: dict[str, str] | None = None,
    ) -> None:
        self.link_id = link_id
        self.failures = dict(failures or {})
        super().__init__(message)
