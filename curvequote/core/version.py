"""Write-once version metadata for a curve instance."""

from __future__ import annotations

from typing import Optional

from ..errors import AlreadyInitializedError, NotInitializedError


class VersionRecord:
    """
    Holds a single version string, set exactly once.

    `ConstantProductCurve` initializes its record in the constructor, so the
    "not yet initialized" failure is unreachable through the public facade.
    """

    __slots__ = ("_version",)

    def __init__(self, version: Optional[str] = None) -> None:
        self._version: Optional[str] = None
        if version is not None:
            self.initialize(version)

    @property
    def is_initialized(self) -> bool:
        return self._version is not None

    def initialize(self, version: str) -> None:
        if not isinstance(version, str):
            raise TypeError("version must be a str")
        if self._version is not None:
            raise AlreadyInitializedError(f"version already set to {self._version!r}")
        # Reject strings that cannot be returned as UTF-8.
        version.encode("utf-8")
        self._version = version

    def get(self) -> str:
        if self._version is None:
            raise NotInitializedError("version has not been initialized")
        return self._version

    def __repr__(self) -> str:
        return f"VersionRecord({self._version!r})"
