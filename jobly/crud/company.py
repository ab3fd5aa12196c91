"""
Data access for companies.

Every statement goes through :func:`jobly.core.database.execute` with bound
values only. Rows come back with the API's field names (``numEmployees``,
``logoUrl``) so they can be handed straight to the response schemas.
"""

import logging
from typing import Any, Dict, List, Mapping, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import execute
from jobly.core.exceptions import BadRequestError, ConflictError, NotFoundError
from jobly.core.sql import WhereBuilder, coerce_int, sql_for_partial_update
from jobly.crud.job import format_equity
from jobly.schemas.company import CompanyCreateRequest, CompanyFilter

logger = logging.getLogger(__name__)

COMPANY_COLUMNS = (
    'handle, name, description, '
    'num_employees AS "numEmployees", logo_url AS "logoUrl"'
)

# API field name -> column name, for partial updates
UPDATE_COLUMN_MAP = {
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
}


def build_filter(filters: CompanyFilter) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for a company search.

    Args:
        filters: Any of name (substring, case-insensitive), min_employees
            and max_employees (inclusive bounds)

    Returns:
        Tuple of (where clause or "", bind values)

    Raises:
        BadRequestError: If max_employees < min_employees, or a bound is
            not an integer
    """
    min_employees = max_employees = None
    if filters.min_employees is not None:
        min_employees = coerce_int("minEmployees", filters.min_employees)
    if filters.max_employees is not None:
        max_employees = coerce_int("maxEmployees", filters.max_employees)

    if min_employees is not None and max_employees is not None and max_employees < min_employees:
        raise BadRequestError("maxEmployees must be greater than or equal to minEmployees")

    where = WhereBuilder()
    if filters.name is not None:
        where.add_substring("name", filters.name)
    if min_employees is not None:
        where.add("num_employees >= {}", min_employees)
    if max_employees is not None:
        where.add("num_employees <= {}", max_employees)

    return where.build()


def create(db: Session, company_data: CompanyCreateRequest) -> Dict[str, Any]:
    """
    Create a new company.

    Args:
        db: Database session
        company_data: Validated company creation data

    Returns:
        The stored company

    Raises:
        BadRequestError: If a company with this handle already exists
        ConflictError: If the insert collides with a row created
            concurrently (or an existing company name)
    """
    handle = company_data.handle
    duplicate_check = execute(
        db,
        """SELECT handle
           FROM companies
           WHERE handle = $1""",
        [handle]
    )
    if duplicate_check:
        logger.warning(f"Rejected duplicate company {handle}")
        raise BadRequestError(f"Duplicate company: {handle}")

    try:
        rows = execute(
            db,
            f"""INSERT INTO companies
               (handle, name, description, num_employees, logo_url)
               VALUES ($1, $2, $3, $4, $5)
               RETURNING {COMPANY_COLUMNS}""",
            [
                handle,
                company_data.name,
                company_data.description,
                company_data.num_employees,
                company_data.logo_url,
            ]
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Company insert for {handle} hit a uniqueness constraint")
        raise ConflictError(f"Company conflicts with an existing one: {handle}")

    logger.info(f"Created company {handle}")
    return rows[0]


def find_all(db: Session) -> List[Dict[str, Any]]:
    """
    Retrieve every company, ordered by name.
    """
    return execute(
        db,
        f"""SELECT {COMPANY_COLUMNS}
           FROM companies
           ORDER BY name"""
    )


def filter(db: Session, filters: CompanyFilter) -> List[Dict[str, Any]]:
    """
    Retrieve companies matching all of the given filters, ordered by name.

    With no filters set this returns the same rows as :func:`find_all`.

    Raises:
        BadRequestError: If the employee range can never match
    """
    where, values = build_filter(filters)
    return execute(
        db,
        f"""SELECT {COMPANY_COLUMNS}
           FROM companies
           {where}
           ORDER BY name""",
        values
    )


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company and the jobs it has posted.

    Args:
        db: Database session
        handle: Company handle

    Returns:
        The company, with ``jobs`` as a list of
        ``{id, title, salary, equity}`` ordered by id

    Raises:
        NotFoundError: If there is no such company
    """
    rows = execute(
        db,
        f"""SELECT {COMPANY_COLUMNS}
           FROM companies
           WHERE handle = $1""",
        [handle]
    )
    if not rows:
        raise NotFoundError(f"No company: {handle}")

    company = rows[0]
    jobs = execute(
        db,
        """SELECT id, title, salary, equity
           FROM jobs
           WHERE company_handle = $1
           ORDER BY id""",
        [handle]
    )
    company["jobs"] = [
        {**job, "equity": format_equity(job["equity"])} for job in jobs
    ]
    return company


def update(db: Session, handle: str, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a company.

    Only the fields present in ``data`` are changed; the handle itself
    cannot be.

    Args:
        db: Database session
        handle: Company handle
        data: Any of name, description, numEmployees, logoUrl

    Returns:
        The updated company

    Raises:
        BadRequestError: If ``data`` is empty
        NotFoundError: If there is no such company
        ConflictError: If the new name is already taken
    """
    set_cols, values = sql_for_partial_update(data, UPDATE_COLUMN_MAP)
    handle_idx = len(values) + 1

    try:
        rows = execute(
            db,
            f"""UPDATE companies
               SET {set_cols}
               WHERE handle = ${handle_idx}
               RETURNING {COMPANY_COLUMNS}""",
            [*values, handle]
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Update conflicts with an existing company: {handle}")

    if not rows:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Updated company {handle}: {', '.join(data.keys())}")
    return rows[0]


def remove(db: Session, handle: str) -> None:
    """
    Delete a company. Its jobs go with it through the foreign key.

    Raises:
        NotFoundError: If there is no such company
    """
    rows = execute(
        db,
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle]
    )
    db.commit()

    if not rows:
        raise NotFoundError(f"No company: {handle}")

    logger.info(f"Deleted company {handle}")
