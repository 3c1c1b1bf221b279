"""Two-outcome result values and the per-directory generation outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_err(self):
        raise ValueError(f"Called unwrap_err on Ok({self.value!r})")


@dataclass(frozen=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise ValueError(f"Called unwrap on Err({self.error!r})") from self.error

    def unwrap_err(self) -> E:
        return self.error


Result = Ok[T] | Err[E]


@dataclass(frozen=True)
class WrittenAt:
    """A barrel file was written at ``path`` (OS-specific form)."""

    path: str


@dataclass(frozen=True)
class Empty:
    """Nothing was generated because the directory had no exports."""


GenerationOutcome = WrittenAt | Empty


__all__ = ["Ok", "Err", "Result", "WrittenAt", "Empty", "GenerationOutcome"]
