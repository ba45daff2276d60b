"""Security test suite for the todo/category application.

This package contains security-focused tests that validate:
- Authentication enforcement
- Authorization (IDOR prevention)
- Input validation (SQL injection prevention)
"""
