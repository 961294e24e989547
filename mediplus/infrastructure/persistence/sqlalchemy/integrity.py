from typing import Iterable

from sqlalchemy.exc import IntegrityError


def violates_unique(error: IntegrityError, name: str, columns: Iterable[str] = ()) -> bool:
    """True when ``error`` is the unique violation of constraint or index ``name``.

    PostgreSQL and MySQL report the constraint name. SQLite names expression
    indexes but reports plain column constraints as ``table.column`` lists,
    so ``columns`` (qualified) covers that case.
    """
    message = str(error.orig)
    if name in message:
        return True
    columns = list(columns)
    return bool(columns) and "UNIQUE constraint failed" in message and all(c in message for c in columns)
