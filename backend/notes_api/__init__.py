"""
Notes API — Application Package
================================

A CRUD REST API for notes plus a small SMTP mailer.

    ┌─────────────────────────────────────┐
    │         Routes (API Layer)          │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Validation + Services (Lifecycle)  │  ← payload rules, note lifecycle
    ├─────────────────────────────────────┤
    │   Repositories (Persistence Client) │  ← CRUD on one AsyncSession
    ├─────────────────────────────────────┤
    │     Models & Schemas (Data)         │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

The mailer (services/email_service.py, mailer.py) shares only the
configuration and exception modules with the API.
"""

__version__ = "1.0.0"
