# Services package init
"""
Notes API — Services Layer
===========================

What:  Business logic between the routes (HTTP) and the repository (persistence).
How:   Services receive their collaborators in the constructor and are
       injected into routes through FastAPI's dependency chain.

Service Inventory:
    - NoteService:   note lifecycle (validate → stamp → persist), pagination
    - EmailService:  templated account emails over SMTP (used by the mailer CLI)
"""
