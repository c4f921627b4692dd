# Routes package init
"""
Notes API — API Routes Package
===============================

Route Inventory:
    - notes.py:   POST/GET /api/notes, GET/PATCH/DELETE /api/notes/{id}
    - health.py:  GET /api/healthchecker

Routes are thin: they pull values out of the request, call NoteService and
return its result. Business rules live in the service, status codes for
failures in the exception handlers.
"""
