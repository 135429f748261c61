"""
KeepNotes.

- backend/: REST API, services, database, configuration
"""
