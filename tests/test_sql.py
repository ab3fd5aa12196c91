"""
Tests for the SQL fragment builders.

Tests cover:
- Partial update SET clauses
- Company and job search WHERE clauses
- Escaping of user text in substring filters
"""

import pytest

from jobly.core.exceptions import BadRequestError
from jobly.core.sql import WhereBuilder, coerce_int, escape_like, sql_for_partial_update
from jobly.crud import company as company_crud
from jobly.crud import job as job_crud
from jobly.schemas.company import CompanyFilter
from jobly.schemas.job import JobFilter


class TestPartialUpdate:
    """Tests for sql_for_partial_update"""

    def test_maps_names_and_numbers_placeholders(self):
        set_cols, values = sql_for_partial_update(
            {"firstName": "x", "isAdmin": False},
            {"firstName": "first_name", "isAdmin": "is_admin"}
        )

        assert set_cols == '"first_name"=$1, "is_admin"=$2'
        assert values == ["x", False]

    def test_unmapped_names_pass_through(self):
        set_cols, values = sql_for_partial_update(
            {"firstName": "Aliya", "age": 32},
            {"firstName": "first_name"}
        )

        assert set_cols == '"first_name"=$1, "age"=$2'
        assert values == ["Aliya", 32]

    def test_no_column_map(self):
        set_cols, values = sql_for_partial_update({"title": "t"})

        assert set_cols == '"title"=$1'
        assert values == ["t"]

    def test_one_placeholder_per_field(self):
        data = {f"field{i}": i for i in range(12)}
        set_cols, values = sql_for_partial_update(data, {})

        assert len(values) == len(data)
        assert set_cols.count("$") == len(data)
        assert set_cols.endswith('"field11"=$12')

    def test_none_values_are_kept(self):
        set_cols, values = sql_for_partial_update({"salary": None})

        assert set_cols == '"salary"=$1'
        assert values == [None]

    @pytest.mark.parametrize("column_map", [{}, None, {"firstName": "first_name"}])
    def test_empty_data_is_rejected(self, column_map):
        with pytest.raises(BadRequestError):
            sql_for_partial_update({}, column_map)


class TestWhereBuilder:
    """Tests for the generic WHERE clause accumulator"""

    def test_no_conditions(self):
        assert WhereBuilder().build() == ("", [])

    def test_conditions_are_anded_in_order(self):
        where = WhereBuilder()
        where.add("a >= {}", 1)
        where.add("b IS NOT NULL")
        where.add("c BETWEEN {} AND {}", 2, 3)

        clause, values = where.build()

        assert clause == "WHERE a >= $1 AND b IS NOT NULL AND c BETWEEN $2 AND $3"
        assert values == [1, 2, 3]

    def test_substring_binds_pattern(self):
        where = WhereBuilder()
        where.add_substring("name", "net")

        clause, values = where.build()

        assert clause == "WHERE lower(name) LIKE lower($1) ESCAPE '\\'"
        assert values == ["%net%"]

    def test_escape_like(self):
        assert escape_like("100%") == "100\\%"
        assert escape_like("a_b") == "a\\_b"
        assert escape_like("back\\slash") == "back\\\\slash"
        assert escape_like("plain") == "plain"

    def test_coerce_int(self):
        assert coerce_int("n", "42") == 42
        assert coerce_int("n", 7) == 7

    @pytest.mark.parametrize("value", ["ten", "1.5", None, True])
    def test_coerce_int_rejects(self, value):
        with pytest.raises(BadRequestError):
            coerce_int("n", value)


class TestCompanyFilter:
    """Tests for the company search clause"""

    def test_no_filters(self):
        assert company_crud.build_filter(CompanyFilter()) == ("", [])

    def test_all_filters(self):
        clause, values = company_crud.build_filter(
            CompanyFilter(name="net", min_employees=1, max_employees=20)
        )

        assert clause == (
            "WHERE lower(name) LIKE lower($1) ESCAPE '\\' "
            "AND num_employees >= $2 AND num_employees <= $3"
        )
        assert values == ["%net%", 1, 20]

    def test_single_bound(self):
        clause, values = company_crud.build_filter(CompanyFilter(max_employees=5))

        assert clause == "WHERE num_employees <= $1"
        assert values == [5]

    def test_equal_bounds_allowed(self):
        clause, values = company_crud.build_filter(
            CompanyFilter(min_employees=3, max_employees=3)
        )

        assert values == [3, 3]

    def test_inverted_range_rejected(self):
        with pytest.raises(BadRequestError):
            company_crud.build_filter(CompanyFilter(min_employees=5, max_employees=1))

    def test_user_text_never_reaches_sql(self):
        hostile = "x' OR '1'='1"
        clause, values = company_crud.build_filter(CompanyFilter(name=hostile))

        assert hostile not in clause
        assert values == [f"%{hostile}%"]


class TestJobFilter:
    """Tests for the job search clause"""

    def test_no_filters(self):
        assert job_crud.build_filter(JobFilter()) == ("", [])

    def test_all_filters(self):
        clause, values = job_crud.build_filter(
            JobFilter(title="eng", min_salary=1000, has_equity=True)
        )

        assert clause == (
            "WHERE lower(title) LIKE lower($1) ESCAPE '\\' "
            "AND salary > $2 AND equity IS NOT NULL AND equity > 0"
        )
        assert values == ["%eng%", 1000]

    def test_has_equity_false_adds_nothing(self):
        assert job_crud.build_filter(JobFilter(has_equity=False)) == ("", [])

    def test_has_equity_alone(self):
        clause, values = job_crud.build_filter(JobFilter(has_equity=True))

        assert clause == "WHERE equity IS NOT NULL AND equity > 0"
        assert values == []
