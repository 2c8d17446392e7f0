"""Exception hierarchy for memberaccess."""


class AccessorError(Exception):
    """Base exception for all memberaccess errors."""


class InvalidArgumentError(AccessorError, ValueError):
    """A required input was missing, empty, or malformed."""


class ArgumentCountError(InvalidArgumentError):
    """A method or constructor was called with the wrong number of arguments."""

    def __init__(self, expected: str, actual: int, target: str = '') -> None:
        self.expected = expected
        self.actual = actual
        prefix = f"{target} expected" if target else "Expected"
        super().__init__(f"{prefix} {expected} parameters but got {actual}.")


class InvalidOperationError(AccessorError):
    """The requested operation is not possible for this member or type."""


class MemberNotFoundError(InvalidOperationError):
    """A late-bound lookup did not resolve to any member."""

    def __init__(self, message: str, name: str, type_name: str) -> None:
        self.member_name = name
        self.type_name = type_name
        super().__init__(message)


class InvalidCastError(AccessorError, TypeError):
    """A value could not be coerced to the declared parameter or member type."""

    def __init__(self, source: type, target: object) -> None:
        self.source_type = source
        self.target_type = target
        target_name = getattr(target, '__name__', None) or repr(target)
        super().__init__(
            f"Unable to cast object of type '{source.__name__}' to type '{target_name}'."
        )
