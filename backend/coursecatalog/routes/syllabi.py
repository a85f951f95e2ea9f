"""
Course Catalog Backend — Syllabus Route Handlers
=================================================

What:  GET /api/syllabi/{course_number} and GET /api/syllabi?course_number=...
How:   Extracts the course number, delegates to SyllabusService, returns JSON.
Who:   Called by the course detail page of the catalog frontend.

Status codes:
    200 list of syllabus links (row_num as string)
    400 course number missing or empty
    404 no syllabi for this course
    500 query or serialization failure
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from coursecatalog.config import settings
from coursecatalog.database import get_db_session
from coursecatalog.schemas.common import ErrorResponse
from coursecatalog.schemas.syllabus import SyllabusLinkResponse
from coursecatalog.services.syllabus_service import syllabus_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Syllabi"])

SYLLABUS_RESPONSES = {
    200: {"description": "Syllabus links, newest semester first"},
    400: {"description": "Course number missing", "model": ErrorResponse},
    404: {"description": "No syllabi for this course", "model": ErrorResponse},
    500: {"description": "Server error", "model": ErrorResponse},
}


def _set_cache_headers(response: Response) -> None:
    # Syllabi are reloaded out-of-band; short shared caching is safe
    response.headers["Cache-Control"] = f"public, max-age={settings.syllabus_cache_max_age}"


@router.get(
    "/syllabi/{course_number}",
    response_model=List[SyllabusLinkResponse],
    responses=SYLLABUS_RESPONSES,
    summary="Get syllabus links for a course",
    description=(
        "Returns every syllabus link recorded for the course, ordered by semester "
        "(descending) then professor (ascending). Course numbers match exactly."
    ),
)
async def get_syllabi(
    course_number: str,
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[SyllabusLinkResponse]:
    """
    Example:
        GET /api/syllabi/CSE%20214
    """
    syllabi = await syllabus_service.get_syllabi(db=db, course_number=course_number)
    _set_cache_headers(response)
    return syllabi


@router.get(
    "/syllabi",
    response_model=List[SyllabusLinkResponse],
    responses=SYLLABUS_RESPONSES,
    summary="Get syllabus links for a course (query parameter form)",
    description=(
        "Same as /api/syllabi/{course_number} for clients that cannot put the "
        "course number in the path. A missing course_number returns 400."
    ),
)
async def get_syllabi_by_query(
    response: Response,
    course_number: Optional[str] = Query(
        default=None,
        description="Exact course number, e.g. 'CSE 214'",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> List[SyllabusLinkResponse]:
    syllabi = await syllabus_service.get_syllabi(db=db, course_number=course_number or "")
    _set_cache_headers(response)
    return syllabi
