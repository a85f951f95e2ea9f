"""
Course Catalog Backend — Syllabus Service
==========================================

What:  Looks up syllabus links for a course number.
Why:   Keeps query building and row conversion out of the route handler so it
       can be tested with a mocked session.
Who:   Called by the /api/syllabi route handlers.

Flow:
    course_number ──▶ validate ──▶ SELECT ... ORDER BY semester DESC,
                                   professor ASC ──▶ serialize rows

Error Translation:
    empty course_number   → ValidationError (400), no query issued
    no matching rows      → NotFoundError (404)
    query failure         → DatabaseError (500)
    bad row identifier    → SerializationError (500, logged separately)
"""

import logging
from typing import Any, List

from sqlalchemy import Select, asc, desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from coursecatalog.exceptions import (
    DatabaseError,
    NotFoundError,
    SerializationError,
    ValidationError,
)
from coursecatalog.models.syllabus_link import SyllabusLink
from coursecatalog.schemas.syllabus import SyllabusLinkResponse

logger = logging.getLogger(__name__)


def build_syllabi_query(course_number: str) -> Select:
    """
    Build the syllabus lookup statement.

    Equality is exact and case-sensitive; "cse 214" does not match "CSE 214".
    Rows tied on both semester and professor come back in database order.
    """
    return (
        select(
            SyllabusLink.row_num,
            SyllabusLink.semester,
            SyllabusLink.professor,
            SyllabusLink.syllabus_link,
        )
        .where(SyllabusLink.course_number == course_number)
        .order_by(desc(SyllabusLink.semester), asc(SyllabusLink.professor))
    )


def serialize_row_num(value: Any) -> str:
    """
    Render a BIGINT row identifier as a decimal string.

    Raises:
        SerializationError: value is NULL or not an integer. bool is rejected
            too even though it subclasses int.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise SerializationError(
            field="row_num",
            context={"value_type": type(value).__name__},
        )
    return str(value)


class SyllabusService:
    """
    Read-only access to the syllabi_links table.

    Stateless: the session is passed in per call and owned by the caller
    (the get_db_session dependency closes it on every exit path).
    """

    async def get_syllabi(
        self,
        db: AsyncSession,
        course_number: str,
    ) -> List[SyllabusLinkResponse]:
        """
        Fetch all syllabus links for a course.

        Args:
            db: Async database session
            course_number: Exact course identifier, e.g. "CSE 214"

        Returns:
            Non-empty list ordered by semester (descending) then professor
            (ascending), each with row_num as a string.

        Raises:
            ValidationError: course_number is missing or empty
            NotFoundError: no syllabus rows for this course
            DatabaseError: query execution failed
            SerializationError: a row identifier could not be rendered
        """
        if not course_number:
            raise ValidationError(
                message="Course number is required",
                field="course_number",
            )

        try:
            result = await db.execute(build_syllabi_query(course_number))
            rows = result.all()
        except Exception as e:
            logger.error(
                "Error fetching syllabi for %s: %s", course_number, str(e), exc_info=True
            )
            raise DatabaseError(
                message="Failed to fetch syllabi",
                context={"course_number": course_number, "error_type": type(e).__name__},
            )

        if not rows:
            raise NotFoundError(
                resource="syllabi",
                resource_id=course_number,
                message="No syllabi found for this course",
            )

        syllabi = [
            SyllabusLinkResponse(
                row_num=serialize_row_num(row.row_num),
                semester=row.semester,
                professor=row.professor,
                syllabus_link=row.syllabus_link,
            )
            for row in rows
        ]
        logger.info("Found %d syllabi for %s", len(syllabi), course_number)
        return syllabi


# ── Singleton Instance ────────────────────────────────────────────────────
syllabus_service = SyllabusService()
