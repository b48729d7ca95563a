"""KeenError – root of every error the client raises."""

from __future__ import annotations

from typing import Any


class KeenError(Exception):
    """Base class for client errors.

    ``collection`` names the event collection the failing operation
    targeted, when there is one. ``to_dict`` is the shape written to
    structured logs and is what :class:`CacheSubmissionError` nests for
    each failed record.
    """

    default_code: str = "keen_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        collection: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.collection = collection
        self.detail: dict[str, Any] = dict(detail or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def with_collection(self, collection: str | None) -> "KeenError":
        """Fill in ``collection`` unless the raiser already set one."""
        if self.collection is None:
            self.collection = collection
        return self

    def __str__(self) -> str:
        if self.collection:
            return f"{self.message} (collection: {self.collection})"
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
        }
        if self.collection is not None:
            payload["collection"] = self.collection
        if self.detail:
            payload["detail"] = self.detail
        if self.__cause__ is not None:
            payload["cause"] = f"{type(self.__cause__).__name__}: {self.__cause__}"
        return payload


__all__ = ["KeenError"]
