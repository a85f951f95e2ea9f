"""
Course Catalog Backend — Course Service
========================================

What:  Filtered course listings plus the distinct department / SBC facets.
Why:   Query building lives here so routes stay thin and the filter logic can
       be unit-tested by compiling statements, without a database.
Who:   Called by the /api/courses and /api/catalog route handlers, and usable
       directly by any caller holding an AsyncSession.

Filter Composition:
    All supplied filters are ANDed together; an omitted (or empty) filter
    matches every row on that dimension.

    department  "Department" IN (:departments)
    sbc         "SBCs" @> ARRAY[:sbc]                  (has every tag)
    search      "Title" ILIKE :pattern
                OR "Course_Number" ILIKE :pattern
                OR "Description" ILIKE :pattern
                OR "SBCs" @> ARRAY[:search]            (exact tag)

    Results are ordered by "Course_Number" ascending.

Memoization:
    Each public method takes an optional QueryCache. When given, results are
    memoized for the lifetime of that cache (one request).
"""

import logging
from typing import Iterable, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import Select, asc, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from coursecatalog.cache import QueryCache
from coursecatalog.exceptions import DatabaseError, SerializationError
from coursecatalog.models.course import Course
from coursecatalog.schemas.course import CourseQuery, CourseResponse

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "\\"

DEPARTMENTS_CACHE_KEY = ("departments",)
SBCS_CACHE_KEY = ("sbcs",)


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so a search term matches literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def build_courses_query(params: CourseQuery) -> Select:
    """Translate a CourseQuery into a SELECT over courses."""
    query = select(Course)

    if params.department:
        query = query.where(Course.department.in_(params.department))

    if params.sbc:
        query = query.where(Course.sbcs.contains(params.sbc))

    if params.search:
        pattern = f"%{escape_like(params.search)}%"
        query = query.where(
            or_(
                Course.title.ilike(pattern, escape=LIKE_ESCAPE),
                Course.course_number.ilike(pattern, escape=LIKE_ESCAPE),
                Course.description.ilike(pattern, escape=LIKE_ESCAPE),
                Course.sbcs.contains([params.search]),
            )
        )

    return query.order_by(asc(Course.course_number))


def distinct_sorted(values: Iterable[Optional[str]]) -> List[str]:
    """Drop NULLs and duplicates, then sort so output order is deterministic."""
    return sorted({value for value in values if value is not None})


class CourseService:
    """
    Read-only access to the courses table.

    Responsibilities:
        - get_courses(): filtered, ordered course listing
        - count_courses(): size of that listing, served from the same cache entry
        - get_departments(): distinct departments for the filter sidebar
        - get_sbcs(): distinct SBC tags for the filter sidebar
    """

    async def get_courses(
        self,
        db: AsyncSession,
        params: Optional[CourseQuery] = None,
        cache: Optional[QueryCache] = None,
    ) -> List[CourseResponse]:
        """
        List courses matching every supplied filter.

        Args:
            db: Async database session
            params: Filters; None behaves like an empty CourseQuery
            cache: Request-scoped memo keyed by the exact filter combination

        Raises:
            DatabaseError: query execution failed
            SerializationError: a row could not be converted to CourseResponse
        """
        params = params or CourseQuery()
        if cache is None:
            return await self._fetch_courses(db, params)
        return await cache.get_or_load(
            params.cache_key(),
            lambda: self._fetch_courses(db, params),
        )

    async def count_courses(
        self,
        db: AsyncSession,
        params: Optional[CourseQuery] = None,
        cache: Optional[QueryCache] = None,
    ) -> int:
        """
        Number of courses matching the filters.

        Shares get_courses' cache entry, so counting a listing that was
        already fetched in this request issues no second query.
        """
        return len(await self.get_courses(db, params, cache))

    async def get_departments(
        self,
        db: AsyncSession,
        cache: Optional[QueryCache] = None,
    ) -> List[str]:
        """Every distinct department, each exactly once, sorted ascending."""
        if cache is None:
            return await self._fetch_departments(db)
        return await cache.get_or_load(
            DEPARTMENTS_CACHE_KEY,
            lambda: self._fetch_departments(db),
        )

    async def get_sbcs(
        self,
        db: AsyncSession,
        cache: Optional[QueryCache] = None,
    ) -> List[str]:
        """Every distinct SBC tag across all courses, each exactly once, sorted ascending."""
        if cache is None:
            return await self._fetch_sbcs(db)
        return await cache.get_or_load(
            SBCS_CACHE_KEY,
            lambda: self._fetch_sbcs(db),
        )

    # ── Queries ───────────────────────────────────────────────────────────

    async def _fetch_courses(
        self,
        db: AsyncSession,
        params: CourseQuery,
    ) -> List[CourseResponse]:
        try:
            result = await db.execute(build_courses_query(params))
            courses = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error fetching courses: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch courses",
                context={
                    "filters": params.model_dump(exclude_none=True),
                    "error_type": type(e).__name__,
                },
            )

        logger.debug("Course query %s matched %d rows", params.cache_key(), len(courses))
        try:
            return [CourseResponse.model_validate(course) for course in courses]
        except PydanticValidationError as e:
            logger.error("Course row could not be converted: %s", str(e))
            raise SerializationError(
                message="Failed to process data for response.",
                context={"error_count": e.error_count()},
            )

    async def _fetch_departments(self, db: AsyncSession) -> List[str]:
        try:
            result = await db.execute(
                select(Course.department).order_by(asc(Course.department))
            )
            departments = result.scalars().all()
        except Exception as e:
            logger.error("Database error fetching departments: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch departments",
                context={"error_type": type(e).__name__},
            )

        return distinct_sorted(departments)

    async def _fetch_sbcs(self, db: AsyncSession) -> List[str]:
        try:
            result = await db.execute(select(Course.sbcs).order_by(asc(Course.sbcs)))
            tag_lists = result.scalars().all()
        except Exception as e:
            logger.error("Database error fetching SBCs: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch SBCs",
                context={"error_type": type(e).__name__},
            )

        return distinct_sorted(tag for tags in tag_lists if tags for tag in tags)


# ── Singleton Instance ────────────────────────────────────────────────────
course_service = CourseService()
