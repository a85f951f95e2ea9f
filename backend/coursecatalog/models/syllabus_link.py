"""
Course Catalog Backend — SyllabusLink SQLAlchemy Model
=======================================================

What:  ORM mapping of the existing `syllabi_links` table.
Who:   Queried by SyllabusService.

Table notes:
    - row_num: BIGINT primary key assigned by the loader. Values can exceed
      2^53, so the API always renders them as strings.
    - course_number: exact-match lookup key (case-sensitive)
    - semester: free-form term label, e.g. "Fall 2024"
"""

from sqlalchemy import BigInteger, Text
from sqlalchemy.orm import Mapped, mapped_column

from coursecatalog.database import Base


class SyllabusLink(Base):
    """
    One syllabus document for one offering of a course.

    Query pattern:
        SELECT row_num, semester, professor, syllabus_link
        FROM syllabi_links WHERE course_number = :course_number
        ORDER BY semester DESC, professor ASC
    """

    __tablename__ = "syllabi_links"

    row_num: Mapped[int] = mapped_column(BigInteger, primary_key=True)
    course_number: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    semester: Mapped[str] = mapped_column(Text, nullable=False)
    professor: Mapped[str] = mapped_column(Text, nullable=False)
    syllabus_link: Mapped[str] = mapped_column(Text, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<SyllabusLink(row_num={self.row_num}, course_number='{self.course_number}', "
            f"semester='{self.semester}')>"
        )
