"""
Data access for jobs.

Every statement goes through :func:`jobly.core.database.execute` with bound
values only.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from jobly.core.database import execute
from jobly.core.exceptions import BadRequestError, ConflictError, NotFoundError
from jobly.core.sql import WhereBuilder, coerce_int, sql_for_partial_update
from jobly.schemas.job import JobCreateRequest, JobFilter

logger = logging.getLogger(__name__)

JOB_COLUMNS = "id, title, salary, equity, company_handle"

# Field names already match the columns
UPDATE_COLUMN_MAP = {
    "title": "title",
    "salary": "salary",
    "equity": "equity",
}


def format_equity(value: Any) -> Optional[str]:
    """
    Render a stored equity value as a decimal string.

    PostgreSQL hands NUMERIC back as Decimal, SQLite as int or float; both
    come out the same way, in plain notation, e.g. ``"0.05"`` or
    ``"0.0000001"``.
    """
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return format(value, "f")


def _bind_equity(value: Optional[Decimal]) -> Optional[str]:
    """Equity is bound in its text form; NUMERIC parses it on every backend."""
    return None if value is None else format(value, "f")


def _to_job(row: Dict[str, Any]) -> Dict[str, Any]:
    row["equity"] = format_equity(row["equity"])
    return row


def build_filter(filters: JobFilter) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for a job search.

    Args:
        filters: Any of title (substring, case-insensitive), min_salary
            (salary strictly above) and has_equity (True keeps only jobs
            with non-zero equity; False or unset does not filter)

    Returns:
        Tuple of (where clause or "", bind values)

    Raises:
        BadRequestError: If min_salary is not an integer
    """
    where = WhereBuilder()
    if filters.title is not None:
        where.add_substring("title", filters.title)
    if filters.min_salary is not None:
        where.add("salary > {}", coerce_int("minSalary", filters.min_salary))
    if filters.has_equity is True:
        where.add("equity IS NOT NULL AND equity > 0")

    return where.build()


def create(db: Session, job_data: JobCreateRequest) -> Dict[str, Any]:
    """
    Create a new job.

    Args:
        db: Database session
        job_data: Validated job creation data

    Returns:
        The stored job, including its new id

    Raises:
        BadRequestError: If the company doesn't exist, or it already has a
            job with this title
        ConflictError: If an identical job was inserted concurrently
    """
    title, handle = job_data.title, job_data.company_handle

    company_check = execute(
        db,
        """SELECT handle
           FROM companies
           WHERE handle = $1""",
        [handle]
    )
    if not company_check:
        raise BadRequestError(f"No company: {handle}")

    duplicate_check = execute(
        db,
        """SELECT id
           FROM jobs
           WHERE title = $1 AND company_handle = $2""",
        [title, handle]
    )
    if duplicate_check:
        logger.warning(f"Rejected duplicate job '{title}' at {handle}")
        raise BadRequestError(f"Duplicate job: {title} at {handle}")

    try:
        rows = execute(
            db,
            f"""INSERT INTO jobs
               (title, salary, equity, company_handle)
               VALUES ($1, $2, $3, $4)
               RETURNING {JOB_COLUMNS}""",
            [title, job_data.salary, _bind_equity(job_data.equity), handle]
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning(f"Job insert for '{title}' at {handle} hit a uniqueness constraint")
        raise ConflictError(f"Duplicate job: {title} at {handle}")

    job = _to_job(rows[0])
    logger.info(f"Created job {job['id']}: {title} at {handle}")
    return job


def find_all(db: Session) -> List[Dict[str, Any]]:
    """
    Retrieve every job, ordered by salary; jobs without one come last.
    """
    rows = execute(
        db,
        f"""SELECT {JOB_COLUMNS}
           FROM jobs
           ORDER BY salary NULLS LAST, id"""
    )
    return [_to_job(row) for row in rows]


def filter(db: Session, filters: JobFilter) -> List[Dict[str, Any]]:
    """
    Retrieve jobs matching all of the given filters, ordered by salary.

    With no filters set this returns the same rows as :func:`find_all`.
    """
    where, values = build_filter(filters)
    rows = execute(
        db,
        f"""SELECT {JOB_COLUMNS}
           FROM jobs
           {where}
           ORDER BY salary NULLS LAST, id""",
        values
    )
    return [_to_job(row) for row in rows]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job by its ID.

    Raises:
        NotFoundError: If there is no such job
    """
    rows = execute(
        db,
        f"""SELECT {JOB_COLUMNS}
           FROM jobs
           WHERE id = $1""",
        [job_id]
    )
    if not rows:
        raise NotFoundError(f"No job: {job_id}")

    return _to_job(rows[0])


def update(db: Session, job_id: int, data: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Partially update a job.

    Args:
        db: Database session
        job_id: Job ID to update
        data: Any of title, salary, equity

    Returns:
        The updated job

    Raises:
        BadRequestError: If ``data`` is empty
        NotFoundError: If there is no such job
        ConflictError: If the new title clashes with another job at the
            same company
    """
    data = dict(data)
    if "equity" in data:
        data["equity"] = _bind_equity(data["equity"])

    set_cols, values = sql_for_partial_update(data, UPDATE_COLUMN_MAP)
    id_idx = len(values) + 1

    try:
        rows = execute(
            db,
            f"""UPDATE jobs
               SET {set_cols}
               WHERE id = ${id_idx}
               RETURNING {JOB_COLUMNS}""",
            [*values, job_id]
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError(f"Update conflicts with another job: {job_id}")

    if not rows:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Updated job {job_id}: {', '.join(data.keys())}")
    return _to_job(rows[0])


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If there is no such job
    """
    rows = execute(
        db,
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id]
    )
    db.commit()

    if not rows:
        raise NotFoundError(f"No job: {job_id}")

    logger.info(f"Deleted job {job_id}")
