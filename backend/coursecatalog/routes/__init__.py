# Routes package init
"""
Course Catalog Backend — API Routes Package
============================================

Route Inventory:
    - syllabi.py:  GET /api/syllabi/{course_number}, GET /api/syllabi
    - courses.py:  GET /api/courses, POST /api/courses/query,
                   GET /api/courses/departments, GET /api/courses/sbcs,
                   GET /api/catalog
    - health.py:   GET /health

Routes stay thin: pull parameters out of the request, call a service,
set headers. Query building belongs in services.
"""
