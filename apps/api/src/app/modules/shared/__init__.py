"""
Shared building blocks used across modules.

- models: abstract ORM base with id and audit timestamps
- document_types: the supporting-document vocabulary (server allow-list and
  client fallback catalog)
"""
