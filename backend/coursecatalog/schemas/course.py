"""
Course Catalog Backend — Course Schemas
========================================

What:  Pydantic models for the course query API contract.
Why:   Strict input validation for filters and a stable response shape that
       does not expose the table's capitalised column names.
How:   CourseQuery validates incoming filters (query string or JSON body);
       CourseResponse is built from ORM rows via from_attributes.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class CourseQuery(BaseModel):
    """
    What:  Optional filters for the course listing.

    Every field is optional and independently omittable. Supplied filters
    combine conjunctively:
        department: course's department is one of these values
        sbc:        course carries every one of these SBC tags
        search:     case-insensitive substring of title, course number or
                    description, or an exact SBC tag

    An empty list or empty string is treated the same as an omitted field.
    Wrong types (a bare string for department, numbers in sbc, a list for
    search) fail validation before any query runs.
    """
    department: Optional[List[str]] = Field(
        default=None,
        description="Departments to include, e.g. ['CSE', 'AMS']",
    )
    sbc: Optional[List[str]] = Field(
        default=None,
        description="SBC tags that every returned course must carry, e.g. ['STEM+']",
    )
    search: Optional[str] = Field(
        default=None,
        description="Free-text search over title, course number, description and SBC tags",
    )

    def cache_key(self) -> Tuple:
        """Hashable key for the exact filter combination, used by QueryCache."""
        return (
            "courses",
            tuple(self.department or ()),
            tuple(self.sbc or ()),
            self.search or "",
        )


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class CourseResponse(BaseModel):
    """
    What:  One course as shown in the catalog listing.
    """
    department: str = Field(description="Department code, e.g. 'CSE'")
    course_number: str = Field(description="Canonical course identifier, e.g. 'CSE 214'")
    title: str = Field(description="Course title")
    description: Optional[str] = Field(default=None, description="Catalog description")
    sbcs: List[str] = Field(default_factory=list, description="SBC tags in display order")

    model_config = {"from_attributes": True}

    @field_validator("sbcs", mode="before")
    @classmethod
    def drop_null_tags(cls, v):
        """text[] may hold NULL elements (or be NULL itself); those are not tags."""
        if v is None:
            return []
        return [tag for tag in v if tag is not None]


class CatalogResponse(BaseModel):
    """
    What:  Everything the catalog page needs in a single response.
    Who:   Returned by GET /api/catalog.

    The course list honours the filters; the departments and sbcs facets are
    always the full distinct lists so the sidebar can offer every option.
    """
    courses: List[CourseResponse] = Field(description="Courses matching the filters")
    departments: List[str] = Field(description="All distinct departments, sorted")
    sbcs: List[str] = Field(description="All distinct SBC tags, sorted")
    total: int = Field(description="Number of courses matching the filters")
