"""Import result model."""

from sqlmodel import SQLModel


class ImportResult(SQLModel):
    """Outcome of importing an export file.

    Imports never raise to the caller; failures are reported through
    ``success`` and ``message``.
    """
    success: bool
    message: str
    imported_parties: int = 0
    imported_guests: int = 0
    imported_tasks: int = 0
