"""
Helpers for building parameterized SQL fragments.

Every fragment produced here uses ``$n`` positional placeholders and comes
with the list of values to bind, so caller text never ends up inside the
statement itself.
"""

from typing import Any, List, Mapping, Optional, Tuple

from jobly.core.exceptions import BadRequestError

LIKE_ESCAPE = "\\"


def sql_for_partial_update(
    data_to_update: Mapping[str, Any],
    column_map: Optional[Mapping[str, str]] = None
) -> Tuple[str, List[Any]]:
    """
    Build the SET clause for a partial update.

    Only the fields present in ``data_to_update`` are changed. Placeholders
    are numbered from 1 in the iteration order of the mapping; the caller
    binds anything else (the row key for WHERE, usually) at
    ``len(values) + 1``.

    Example:
        >>> sql_for_partial_update({"firstName": "Aliya", "age": 32},
        ...                        {"firstName": "first_name"})
        ('"first_name"=$1, "age"=$2', ['Aliya', 32])

    Args:
        data_to_update: Field name -> new value
        column_map: Field name -> column name; unmapped fields are used as-is

    Returns:
        Tuple of (set clause, bind values)

    Raises:
        BadRequestError: If there is nothing to update
    """
    keys = list(data_to_update.keys())
    if not keys:
        raise BadRequestError("No data")

    column_map = column_map or {}
    cols = [
        f'"{column_map.get(key, key)}"=${idx}'
        for idx, key in enumerate(keys, start=1)
    ]

    return ", ".join(cols), [data_to_update[key] for key in keys]


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` only ever matches literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def coerce_int(name: str, value: Any) -> int:
    """Turn a numeric filter value into an int or raise BadRequestError."""
    if isinstance(value, bool):
        raise BadRequestError(f"{name} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"{name} must be an integer")


class WhereBuilder:
    """
    Accumulates AND-ed conditions and their bind values.

    Conditions are written with ``{}`` where the next placeholder goes;
    :meth:`add` fills in ``$n`` so numbering always matches ``values``.
    """

    def __init__(self):
        self.conditions: List[str] = []
        self.values: List[Any] = []

    def add(self, condition: str, *values: Any) -> None:
        placeholders = []
        for value in values:
            self.values.append(value)
            placeholders.append(f"${len(self.values)}")
        self.conditions.append(condition.format(*placeholders))

    def add_substring(self, column: str, value: str) -> None:
        """Case-insensitive "contains" match on ``column``."""
        self.add(
            f"lower({column}) LIKE lower({{}}) ESCAPE '{LIKE_ESCAPE}'",
            f"%{escape_like(value)}%"
        )

    def build(self) -> Tuple[str, List[Any]]:
        if not self.conditions:
            return "", []
        return "WHERE " + " AND ".join(self.conditions), list(self.values)
