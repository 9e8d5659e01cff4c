"""
StudyNotes — Services Layer
============================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - NoteService: the persistence gateway (list/get/create/update/delete/search)
"""
