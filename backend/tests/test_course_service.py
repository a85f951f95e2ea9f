"""
Course Catalog Backend — Course Service Unit Tests
===================================================

What:  Tests for filter composition, facets and request-scoped memoization.
How:   Statements are compiled against the PostgreSQL dialect to check the
       generated SQL; service methods run against a mocked session.

What we test:
    ✅ Omitted / empty filters add no WHERE clause
    ✅ department → IN, sbc → array containment (has every), ANDed together
    ✅ search → ILIKE on title, number, description OR exact tag
    ✅ LIKE wildcards in the search term are escaped
    ✅ Results ordered by course number ascending
    ✅ Facets return each value exactly once, sorted
    ✅ Same filters within one cache hit the database once
"""

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from coursecatalog.cache import QueryCache
from coursecatalog.exceptions import DatabaseError, SerializationError
from coursecatalog.schemas.course import CourseQuery
from coursecatalog.services.course_service import (
    CourseService,
    build_courses_query,
    distinct_sorted,
    escape_like,
)

from conftest import make_course, make_result


def compile_pg(params: CourseQuery):
    return build_courses_query(params).compile(dialect=postgresql.dialect())


class TestBuildCoursesQuery:

    def test_no_filters_selects_everything(self):
        sql = str(compile_pg(CourseQuery()))

        assert "WHERE" not in sql
        assert 'ORDER BY courses."Course_Number" ASC' in sql

    def test_empty_filters_are_ignored(self):
        sql = str(compile_pg(CourseQuery(department=[], sbc=[], search="")))

        assert "WHERE" not in sql

    def test_department_filter_uses_in(self):
        compiled = compile_pg(CourseQuery(department=["CSE", "AMS"]))
        sql = str(compiled)

        assert 'courses."Department" IN' in sql
        assert ["CSE", "AMS"] in compiled.params.values()

    def test_sbc_filter_requires_every_tag(self):
        compiled = compile_pg(CourseQuery(sbc=["STEM+", "TECH"]))
        sql = str(compiled)

        assert 'courses."SBCs" @>' in sql
        assert ["STEM+", "TECH"] in compiled.params.values()
        # "has any" would be the && overlap operator
        assert "&&" not in sql

    def test_search_is_case_insensitive_substring_or_exact_tag(self):
        compiled = compile_pg(CourseQuery(search="Data"))
        sql = str(compiled)

        assert 'courses."Title" ILIKE' in sql
        assert 'courses."Course_Number" ILIKE' in sql
        assert 'courses."Description" ILIKE' in sql
        assert sql.count("ILIKE") == 3
        assert sql.count(" OR ") == 3
        assert "%Data%" in compiled.params.values()
        assert ["Data"] in compiled.params.values()

    def test_search_escapes_like_wildcards(self):
        compiled = compile_pg(CourseQuery(search="100%_done"))

        assert "%100\\%\\_done%" in compiled.params.values()
        # Tag match uses the raw term
        assert ["100%_done"] in compiled.params.values()

    def test_all_filters_combine_with_and(self):
        sql = str(compile_pg(CourseQuery(department=["CSE"], sbc=["STEM+"], search="data")))
        where = sql.split("WHERE")[1].split("ORDER BY")[0]

        assert '"Department" IN' in where
        assert '"SBCs" @>' in where
        assert where.count(" AND ") == 2
        # The search alternatives are grouped so OR cannot escape the AND chain
        assert "AND (" in where

    def test_escape_like_doubles_backslash(self):
        assert escape_like("a\\b") == "a\\\\b"


class TestDistinctSorted:

    def test_removes_duplicates_and_nulls(self):
        assert distinct_sorted(["CSE", "AMS", "CSE", None, "AMS"]) == ["AMS", "CSE"]

    def test_output_sorted_regardless_of_input_order(self):
        assert distinct_sorted(["WRT", "CSE", "AMS"]) == ["AMS", "CSE", "WRT"]


class TestGetCourses:

    def setup_method(self):
        self.service = CourseService()

    @pytest.mark.asyncio
    async def test_returns_course_responses(self, mock_db_session, sample_courses):
        mock_db_session.execute.return_value = make_result(scalars=sample_courses)

        result = await self.service.get_courses(mock_db_session, CourseQuery())

        assert [c.course_number for c in result] == ["AMS 110", "CSE 114", "CSE 214", "WRT 102"]
        assert result[1].sbcs == ["TECH", "STEM+"]
        assert result[1].department == "CSE"

    @pytest.mark.asyncio
    async def test_none_params_behave_like_no_filters(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(scalars=[])

        result = await self.service.get_courses(mock_db_session)

        assert result == []
        statement = mock_db_session.execute.await_args.args[0]
        assert "WHERE" not in str(statement.compile(dialect=postgresql.dialect()))

    @pytest.mark.asyncio
    async def test_department_and_sbc_example(self, mock_db_session, sample_courses):
        matching = [c for c in sample_courses if c.department == "CSE" and "STEM+" in c.sbcs]
        mock_db_session.execute.return_value = make_result(scalars=matching)

        result = await self.service.get_courses(
            mock_db_session, CourseQuery(department=["CSE"], sbc=["STEM+"])
        )

        assert [c.course_number for c in result] == ["CSE 114", "CSE 214"]
        assert all(c.department == "CSE" and "STEM+" in c.sbcs for c in result)

    @pytest.mark.asyncio
    async def test_query_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        with pytest.raises(DatabaseError) as exc_info:
            await self.service.get_courses(mock_db_session, CourseQuery(department=["CSE"]))

        assert exc_info.value.context["filters"] == {"department": ["CSE"]}

    @pytest.mark.asyncio
    async def test_cache_reuses_result_for_same_filters(self, mock_db_session, sample_courses):
        mock_db_session.execute.return_value = make_result(scalars=sample_courses)
        cache = QueryCache()
        params = CourseQuery(department=["CSE"], search="data")

        first = await self.service.get_courses(mock_db_session, params, cache=cache)
        second = await self.service.get_courses(
            mock_db_session, CourseQuery(department=["CSE"], search="data"), cache=cache
        )

        assert first is second
        mock_db_session.execute.assert_awaited_once()
        assert cache.hits == 1

    @pytest.mark.asyncio
    async def test_cache_separates_filter_combinations(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(scalars=[])
        cache = QueryCache()

        await self.service.get_courses(mock_db_session, CourseQuery(department=["CSE"]), cache=cache)
        await self.service.get_courses(mock_db_session, CourseQuery(sbc=["CSE"]), cache=cache)

        assert mock_db_session.execute.await_count == 2
        assert len(cache) == 2

    @pytest.mark.asyncio
    async def test_without_cache_every_call_queries(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(scalars=[])

        await self.service.get_courses(mock_db_session, CourseQuery())
        await self.service.get_courses(mock_db_session, CourseQuery())

        assert mock_db_session.execute.await_count == 2

    @pytest.mark.asyncio
    async def test_null_tags_are_dropped(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(
            scalars=[make_course("CSE 114", "CSE", sbcs=["STEM+", None, "TECH"])]
        )

        result = await self.service.get_courses(mock_db_session)

        assert result[0].sbcs == ["STEM+", "TECH"]

    @pytest.mark.asyncio
    async def test_null_tag_array_becomes_empty_list(self, mock_db_session):
        course = make_course("CSE 114", "CSE")
        course.sbcs = None
        mock_db_session.execute.return_value = make_result(scalars=[course])

        result = await self.service.get_courses(mock_db_session)

        assert result[0].sbcs == []

    @pytest.mark.asyncio
    async def test_unconvertible_row_becomes_serialization_error(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(
            scalars=[make_course("CSE 114", "CSE", title=None)]
        )

        with pytest.raises(SerializationError):
            await self.service.get_courses(mock_db_session)

    @pytest.mark.asyncio
    async def test_count_reuses_cached_listing(self, mock_db_session, sample_courses):
        mock_db_session.execute.return_value = make_result(scalars=sample_courses)
        cache = QueryCache()
        params = CourseQuery(department=["CSE"])

        courses = await self.service.get_courses(mock_db_session, params, cache=cache)
        total = await self.service.count_courses(mock_db_session, params, cache=cache)

        assert total == len(courses) == 4
        mock_db_session.execute.assert_awaited_once()
        assert cache.hits == 1


class TestFacets:

    def setup_method(self):
        self.service = CourseService()

    @pytest.mark.asyncio
    async def test_departments_distinct(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(
            scalars=["AMS", "CSE", "CSE", "CSE", "WRT"]
        )

        result = await self.service.get_departments(mock_db_session)

        assert result == ["AMS", "CSE", "WRT"]

    @pytest.mark.asyncio
    async def test_sbcs_flattened_and_distinct(self, mock_db_session):
        # Array ordering from the database does not sort the flattened tags
        mock_db_session.execute.return_value = make_result(
            scalars=[["QPS"], ["TECH", "STEM+"], ["STEM+"], [], None, ["WRT", "QPS"]]
        )

        result = await self.service.get_sbcs(mock_db_session)

        assert result == ["QPS", "STEM+", "TECH", "WRT"]

    @pytest.mark.asyncio
    async def test_facets_cached_per_request(self, mock_db_session):
        mock_db_session.execute.return_value = make_result(scalars=["CSE"])
        cache = QueryCache()

        await self.service.get_departments(mock_db_session, cache=cache)
        await self.service.get_departments(mock_db_session, cache=cache)

        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_facet_failure_becomes_database_error(self, mock_db_session):
        mock_db_session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))

        with pytest.raises(DatabaseError):
            await self.service.get_sbcs(mock_db_session)
