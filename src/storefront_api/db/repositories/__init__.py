"""
storefront_api.db.repositories

Repository package.

Responsibilities:
- Group the read paths the API pipeline borrows from external stores.
"""

# Package marker; repositories are imported directly from submodules.
