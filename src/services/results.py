from dataclasses import dataclass
from typing import Generic, Literal, Optional, TypeVar, Union

T = TypeVar("T")

USER_NOT_FOUND = "User not found"
NOT_FOUND_CODE = "NOT_FOUND"


@dataclass(frozen=True)
class Success(Generic[T]):
    data: T
    count: Optional[int] = None
    success: Literal[True] = True


@dataclass(frozen=True)
class Failure:
    error: str
    code: Optional[str] = None
    success: Literal[False] = False

    @property
    def not_found(self) -> bool:
        return self.error == USER_NOT_FOUND

    @classmethod
    def user_not_found(cls) -> "Failure":
        return cls(error=USER_NOT_FOUND, code=NOT_FOUND_CODE)

    @classmethod
    def from_exception(cls, error: BaseException) -> "Failure":
        return cls(error=str(error), code=error_code(error))


Result = Union[Success[T], Failure]


def error_code(error: BaseException) -> str:
    """Driver error code when there is one, otherwise the exception class name."""
    orig = getattr(error, "orig", None)
    for candidate in (getattr(orig, "pgcode", None), getattr(error, "code", None)):
        if candidate:
            return str(candidate)
    return type(error).__name__
