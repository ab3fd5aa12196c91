"""
CRUD operations (Create, Read, Update, Delete) for companies and jobs.

This layer sits between the API routes and the database: it builds
parameterized statements, runs them, and raises the errors in
``jobly.core.exceptions`` when a request can't be satisfied.
"""

from jobly.crud import company, job

__all__ = ["company", "job"]
