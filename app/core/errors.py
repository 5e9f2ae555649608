"""Error taxonomy for the data layer.

Storage errors carry the SQL statement that failed so accessors can log a
useful diagnostic while keeping a short, human-readable message for display.
"""


class DatabaseError(Exception):
    """Base class for every error raised by the data layer.

    Attributes:
        message: Human-readable description of the failure.
        code: Stable machine-readable error code.
        sql: The offending SQL statement, when one is involved.
    """

    code = "DATABASE_ERROR"

    def __init__(self, message: str, sql: str | None = None):
        super().__init__(message)
        self.message = message
        self.sql = sql

    def __str__(self) -> str:
        return self.message


class InitializationError(DatabaseError):
    """The database failed to start, or was used before it was ready."""

    code = "INIT_ERROR"


class MigrationError(InitializationError):
    """A schema migration failed; startup must abort."""

    code = "MIGRATION_ERROR"


class QueryError(DatabaseError):
    code = "QUERY_ERROR"


class UpdateError(DatabaseError):
    code = "UPDATE_ERROR"


class TransactionError(DatabaseError):
    code = "TRANSACTION_ERROR"


class SnapshotError(DatabaseError):
    """A stored snapshot could not be decoded or loaded."""

    code = "SNAPSHOT_ERROR"


class NotFoundError(DatabaseError):
    code = "NOT_FOUND"


class DependencyCycleError(DatabaseError):
    """Adding a todo dependency would make a todo (transitively) depend on itself."""

    code = "DEPENDENCY_CYCLE"


class ImportValidationError(Exception):
    """Import payload is malformed or has an unrecognized shape.

    Never escapes the import functions; it is converted into a failed
    ImportResult.
    """
