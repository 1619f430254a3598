"""
Travel Crew Backend — Application Package Initializer
=======================================================

What: Content backend for the Yala Travel Crew site. Tours, car rentals,
      packages and gallery items, each paired with a hosted image.
Who:  Imported by uvicorn (`travelcrew.main:app`), Alembic and pytest.

Architecture Note:

    ┌─────────────────────────────────────┐
    │   Routes (one router per kind)      │  ← multipart parsing, status codes
    ├─────────────────────────────────────┤
    │   ResourceService + validators      │  ← CRUD + image lifecycle
    ├──────────────────┬──────────────────┤
    │  DocumentStore   │   AssetStore     │  ← SQLAlchemy │ Cloudinary / disk
    └──────────────────┴──────────────────┘
"""

__version__ = "1.0.0"
