# Structured outcomes for provisioning steps

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class StepError:
    step: str
    message: str
    fatal: bool = True

    def __str__(self) -> str:
        return f"{self.step}: {self.message}"


@dataclass
class StepResult(Generic[T]):
    """
    Outcome of a single pipeline step.

    A step that succeeded with a degraded side effect (e.g. a failed field
    merge on an otherwise usable brand) carries ``value`` *and* warnings.
    """
    value: Optional[T] = None
    error: Optional[StepError] = None
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T = None, warnings: Optional[List[str]] = None) -> "StepResult[T]":
        return cls(value=value, warnings=list(warnings or []))

    @classmethod
    def failure(cls, step: str, message: str, fatal: bool = True) -> "StepResult[T]":
        return cls(error=StepError(step=step, message=message, fatal=fatal))
