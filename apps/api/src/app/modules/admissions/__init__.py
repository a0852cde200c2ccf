"""
Admissions Module

Server side of phase 1 of the admission workflow: learners' applications.

API Endpoints:
- POST /admissions/submit - Submit a new application (rate limited per IP)
- GET /admissions/{id} - Non-sensitive summary of a received application
- GET /admissions/applications, GET|PATCH /admissions/applications/{id},
  GET /admissions/statistics - Review by the admissions office

Submitted forms are checked with the same stage rules as the client form,
stored with PENDING status, and acknowledged by email when a guardian email
was provided.
"""

from .router import router

__all__ = ["router"]
