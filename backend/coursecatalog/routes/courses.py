"""
Course Catalog Backend — Course Route Handlers
===============================================

What:  Course listing, filter facets, and the combined catalog page payload.
How:   Filters arrive as repeated query parameters (GET) or a JSON body
       (POST /api/courses/query) and are validated into a CourseQuery.
Who:   Called by the catalog browse page and its filter sidebar.

Route Inventory:
    GET  /api/courses               filtered course list
    POST /api/courses/query         same, filters in the request body
    GET  /api/courses/departments   distinct departments
    GET  /api/courses/sbcs          distinct SBC tags
    GET  /api/catalog               courses + facets in one response

Example:
    GET /api/courses?department=CSE&sbc=STEM%2B&search=data
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from coursecatalog.cache import QueryCache, get_query_cache
from coursecatalog.database import get_db_session
from coursecatalog.schemas.common import ErrorResponse
from coursecatalog.schemas.course import CatalogResponse, CourseQuery, CourseResponse
from coursecatalog.services.course_service import course_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Courses"])

ERROR_RESPONSES = {
    500: {"description": "Server error", "model": ErrorResponse},
}


def course_query_params(
    department: Optional[List[str]] = Query(
        default=None,
        description="Department filter; repeat the parameter for several departments",
    ),
    sbc: Optional[List[str]] = Query(
        default=None,
        description="SBC tags every course must carry; repeat for several tags",
    ),
    search: Optional[str] = Query(
        default=None,
        description="Case-insensitive text search (title, number, description) or exact SBC tag",
    ),
) -> CourseQuery:
    """Collect the course filters from the query string."""
    return CourseQuery(department=department, sbc=sbc, search=search)


@router.get(
    "/courses",
    response_model=List[CourseResponse],
    responses=ERROR_RESPONSES,
    summary="List courses",
    description=(
        "Returns courses matching every supplied filter, ordered by course number. "
        "Omitted filters do not restrict the result."
    ),
)
async def list_courses(
    params: CourseQuery = Depends(course_query_params),
    db: AsyncSession = Depends(get_db_session),
    cache: QueryCache = Depends(get_query_cache),
) -> List[CourseResponse]:
    return await course_service.get_courses(db=db, params=params, cache=cache)


@router.post(
    "/courses/query",
    response_model=List[CourseResponse],
    responses=ERROR_RESPONSES,
    summary="List courses (filters in body)",
    description=(
        "Same as GET /api/courses with filters sent as JSON: "
        '{"department": [...], "sbc": [...], "search": "..."}. '
        "A missing body means no filters. Malformed filters are rejected with 422."
    ),
)
async def query_courses(
    params: Optional[CourseQuery] = None,
    db: AsyncSession = Depends(get_db_session),
    cache: QueryCache = Depends(get_query_cache),
) -> List[CourseResponse]:
    return await course_service.get_courses(db=db, params=params, cache=cache)


@router.get(
    "/courses/departments",
    response_model=List[str],
    responses=ERROR_RESPONSES,
    summary="List departments",
    description="Every distinct department, each once, sorted ascending.",
)
async def list_departments(
    db: AsyncSession = Depends(get_db_session),
    cache: QueryCache = Depends(get_query_cache),
) -> List[str]:
    return await course_service.get_departments(db=db, cache=cache)


@router.get(
    "/courses/sbcs",
    response_model=List[str],
    responses=ERROR_RESPONSES,
    summary="List SBC tags",
    description="Every distinct SBC tag across all courses, each once, sorted ascending.",
)
async def list_sbcs(
    db: AsyncSession = Depends(get_db_session),
    cache: QueryCache = Depends(get_query_cache),
) -> List[str]:
    return await course_service.get_sbcs(db=db, cache=cache)


@router.get(
    "/catalog",
    response_model=CatalogResponse,
    responses=ERROR_RESPONSES,
    summary="Catalog page payload",
    description=(
        "Filtered courses together with the full department and SBC facet lists, "
        "so the browse page renders from one request."
    ),
)
async def get_catalog(
    params: CourseQuery = Depends(course_query_params),
    db: AsyncSession = Depends(get_db_session),
    cache: QueryCache = Depends(get_query_cache),
) -> CatalogResponse:
    # One AsyncSession cannot run statements concurrently, so these run in sequence
    courses = await course_service.get_courses(db=db, params=params, cache=cache)
    total = await course_service.count_courses(db=db, params=params, cache=cache)
    departments = await course_service.get_departments(db=db, cache=cache)
    sbcs = await course_service.get_sbcs(db=db, cache=cache)

    logger.debug(
        "Catalog rendered: %d courses, cache hits=%d misses=%d",
        len(courses),
        cache.hits,
        cache.misses,
    )
    return CatalogResponse(
        courses=courses,
        departments=departments,
        sbcs=sbcs,
        total=total,
    )
