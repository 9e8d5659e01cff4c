"""
StudyNotes — Application Package Initializer
=============================================

What:  Block-based note editor: a REST backend persisting notes and the
       client-side editing model that drives it.

Architecture Note:
    ┌─────────────────────────────────────┐
    │     Editor (client-side library)    │  ← state machine, keyboard, autosave
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← persistence gateway
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    The editor talks to the routes over HTTP only (studynotes.editor.client);
    it never imports the service or database layers.
"""

__version__ = "1.0.0"
