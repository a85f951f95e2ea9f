"""
Course Catalog Backend — Syllabus Schemas
==========================================

What:  Pydantic models for the syllabus lookup API contract.
Why:   The response shape differs from the table: row_num leaves as a string
       and course_number is implied by the request path.
"""

from pydantic import BaseModel, Field


class SyllabusLinkResponse(BaseModel):
    """
    What:  One syllabus link as returned by GET /api/syllabi/{course_number}.

    row_num is a string because JavaScript clients parse JSON numbers as
    doubles and would silently round BIGINT identifiers.
    """
    row_num: str = Field(description="Row identifier (BIGINT rendered as a decimal string)")
    semester: str = Field(description="Academic term, e.g. 'Fall 2024'")
    professor: str = Field(description="Instructor of record")
    syllabus_link: str = Field(description="URL of the syllabus document")
