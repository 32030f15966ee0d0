from pydantic import BaseModel


class ValidationOutcome[ValueT](BaseModel):
    """Result of validating untrusted input: either a value or an error message."""

    value: ValueT | None = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.value is not None and self.error == ""

    @classmethod
    def success(cls, value: ValueT) -> "ValidationOutcome[ValueT]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "ValidationOutcome[ValueT]":
        return cls(error=error)
