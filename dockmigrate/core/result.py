from typing import Generic, TypeVar, Optional, cast
from dataclasses import dataclass

T = TypeVar('T')
E = TypeVar('E', bound=Exception)


@dataclass(frozen=True)
class Result(Generic[T, E]):
    """Result type for explicit error handling without exceptions"""
    _value: Optional[T] = None
    _error: Optional[E] = None
    _ok: bool = True

    def __post_init__(self):
        # A failure always carries its error; a success never does
        if self._ok and self._error is not None:
            raise ValueError("Successful result cannot carry an error")
        if not self._ok and self._error is None:
            raise ValueError("Failed result must carry an error")

    @classmethod
    def success(cls, value: T = None) -> 'Result[T, E]':
        """Create a successful result"""
        return cls(_value=value, _ok=True)

    @classmethod
    def failure(cls, error: E) -> 'Result[T, E]':
        """Create a failed result"""
        return cls(_error=error, _ok=False)

    @property
    def is_success(self) -> bool:
        return self._ok

    @property
    def is_failure(self) -> bool:
        return not self._ok

    @property
    def value(self) -> T:
        """Get the success value (raises ValueError if result is failure)"""
        if self.is_failure:
            raise ValueError("Cannot get value from failed result")
        return cast(T, self._value)

    @property
    def error(self) -> E:
        """Get the error (raises ValueError if result is success)"""
        if self.is_success:
            raise ValueError("Cannot get error from successful result")
        return cast(E, self._error)

    def __bool__(self) -> bool:
        """Result is truthy if successful"""
        return self.is_success

    def __str__(self) -> str:
        if self.is_success:
            return f"Success({self._value})"
        return f"Failure({self._error})"

    def __repr__(self) -> str:
        return self.__str__()
