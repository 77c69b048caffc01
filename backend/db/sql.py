"""
SQL helpers shared by the company and job services.

- sql_for_partial_update: sparse update payload -> SET clause + values
- execute_positional: run a "$n" placeholder statement through a Session
- is_unique_violation: tell duplicate keys apart from other integrity errors
"""
import re
from typing import Any, Mapping, NamedTuple, Optional, Sequence

from sqlalchemy import bindparam, text
from sqlalchemy.engine import Result
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.types import TypeEngine

from db.exceptions import ValidationError

_PLACEHOLDER = re.compile(r"\$(\d+)")


class PartialUpdate(NamedTuple):
    """Output of sql_for_partial_update. All three sequences are aligned."""
    set_cols: str
    values: list[Any]
    columns: list[str]


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    field_map: Mapping[str, str],
) -> PartialUpdate:
    """
    Build the SET part of a partial UPDATE.

    Keys are external (camelCase) field names; field_map translates the ones
    whose column name differs, everything else passes through unchanged.
    Placeholders are numbered from $1 in payload key order. Values are not
    coerced, so an explicit None clears the column.

    Args:
        data_to_update: Fields to change, e.g. {"firstName": "Aliya", "age": 32}
        field_map: External name -> column name, e.g. {"firstName": "first_name"}

    Returns:
        PartialUpdate(set_cols='"first_name"=$1, "age"=$2',
                      values=["Aliya", 32],
                      columns=["first_name", "age"])

    Raises:
        ValidationError: If data_to_update is empty
    """
    if not data_to_update:
        raise ValidationError("No data")

    columns = [field_map.get(key, key) for key in data_to_update]
    cols = [f'"{column}"=${idx}' for idx, column in enumerate(columns, start=1)]

    return PartialUpdate(
        set_cols=", ".join(cols),
        values=list(data_to_update.values()),
        columns=columns,
    )


def execute_positional(
    db: Session,
    statement: str,
    values: Sequence[Any],
    types: Optional[Sequence[Optional[TypeEngine]]] = None,
) -> Result:
    """
    Execute a statement written with $1..$n placeholders.

    The placeholders are rewritten to named binds (:p1..:pn) so the statement
    runs on any SQLAlchemy dialect. When types are given (one per value, None
    to infer), each bind is processed with that column type.
    """
    sql = _PLACEHOLDER.sub(lambda m: f":p{m.group(1)}", statement)
    params = [
        bindparam(f"p{idx}", value, type_=types[idx - 1] if types else None)
        for idx, value in enumerate(values, start=1)
    ]
    return db.execute(text(sql).bindparams(*params))


def is_unique_violation(error: IntegrityError) -> bool:
    """
    True if the IntegrityError came from a unique/primary key constraint.

    PostgreSQL reports SQLSTATE 23505; SQLite only has the message text.
    """
    if getattr(error.orig, "pgcode", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(error.orig)
