"""
StudyNotes — API Routes Package
================================

Route Inventory:
    - notes.py:   GET    /api/notes            (list)
                  GET    /api/notes/search     (search by title/content)
                  GET    /api/notes/{id}       (detail)
                  POST   /api/notes            (create)
                  PATCH  /api/notes/{id}       (update title/blocks)
                  DELETE /api/notes/{id}       (delete)
    - health.py:  GET    /health               (service health check)

Routes stay thin: extract request data, call NoteService, set status codes.
"""
