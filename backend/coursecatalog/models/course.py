"""
Course Catalog Backend — Course SQLAlchemy Model
=================================================

What:  ORM mapping of the existing `courses` table.
Who:   Queried by CourseService for listings, filtering and facets.

Table notes:
    The table was created by the catalog loader with capitalised, quoted
    column names ("Department", "Course_Number", ...). The Python attributes
    use snake_case and map onto those names explicitly.

    SBCs is a PostgreSQL text[]; filtering relies on the array containment
    operator (@>), which is why the service needs PostgreSQL.
"""

from typing import List, Optional

from sqlalchemy import Text
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import Mapped, mapped_column

from coursecatalog.database import Base


class Course(Base):
    """
    A catalog course.

    Query patterns:
        - Filtered listing: WHERE "Department" IN (...) AND "SBCs" @> ARRAY[...]
          AND (title/number/description ILIKE ... OR "SBCs" @> ARRAY[:search])
          ORDER BY "Course_Number" ASC
        - Facets: SELECT "Department" / SELECT "SBCs" for the filter sidebar
    """

    __tablename__ = "courses"

    course_number: Mapped[str] = mapped_column("Course_Number", Text, primary_key=True)
    department: Mapped[str] = mapped_column("Department", Text, nullable=False)
    title: Mapped[str] = mapped_column("Title", Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column("Description", Text, nullable=True)

    # Order matters for display only; filtering treats it as a set
    sbcs: Mapped[List[str]] = mapped_column(
        "SBCs",
        ARRAY(Text),
        nullable=False,
        default=list,
    )

    def __repr__(self) -> str:
        return f"<Course(course_number='{self.course_number}', department='{self.department}')>"
