"""
Discriminated result returned by every use case.

    Ok(value)  - the command succeeded
    Err(error) - the command failed with a typed RaidLootError

Callers branch on `is_ok()` / `is_err()` or call `unwrap()` to re-raise.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from raidloot.core.errors import RaidLootError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    error: RaidLootError

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Err]
