# Services package init
"""
Course Catalog Backend — Services Layer
========================================

What:  Query layer sitting between routes (HTTP) and the database.
Why:   Routes handle HTTP; services build queries and shape results.

Service Inventory:
    - SyllabusService: syllabus links for one course number
    - CourseService: filtered course listing and department / SBC facets
"""
