"""
storefront_api.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories for the stores the
  API pipeline reads from (users/roles, orders, catalog).
"""

# Package marker.
