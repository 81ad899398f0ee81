"""Exception hierarchy for member-query."""

from pathlib import Path


class MemberQueryError(Exception):
    """Base exception for all member-query errors.

    All exceptions in this package inherit from this class,
    allowing callers to catch all member-query errors with
    a single except clause.
    """

    pass


# Configuration Errors
class ConfigError(MemberQueryError):
    """Configuration-related errors."""

    pass


class ConfigParseError(ConfigError):
    """Configuration file has invalid syntax."""

    def __init__(self, path: Path, detail: str) -> None:
        self.path = path
        self.detail = detail
        super().__init__(f"Invalid config at {path}: {detail}")


class ConfigValidationError(ConfigError):
    """Configuration value is invalid."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid config value for '{key}': {reason}")


# Predicate Errors
class EmptyCombinatorError(MemberQueryError):
    """AND/OR combination built without any child predicate."""

    def __init__(self, kind: str) -> None:
        self.kind = kind
        super().__init__(f"Cannot build {kind.upper()} without child predicates")


# Execution Errors
class ExecutionError(MemberQueryError):
    """The execution layer failed to run a query.

    The underlying driver/ORM exception is kept as ``__cause__``.
    """

    pass


class NonUniqueResultError(ExecutionError):
    """A single-row fetch matched more than one row."""

    def __init__(self) -> None:
        super().__init__("Expected at most one row, got more than one")


# Database Errors
class DatabaseError(MemberQueryError):
    """Database-related errors."""

    pass


class MemberNotFoundError(DatabaseError):
    """Member doesn't exist."""

    def __init__(self, member_id: int) -> None:
        self.member_id = member_id
        super().__init__(f"Member not found: {member_id}")


# Validation Errors
class ValidationError(MemberQueryError):
    """Invalid input value."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}: {reason}")


# Query language Errors
class SearchParseError(MemberQueryError):
    """Raised when a search query cannot be parsed."""

    def __init__(self, query: str, message: str) -> None:
        self.query = query
        super().__init__(f"Failed to parse search query '{query}': {message}")
