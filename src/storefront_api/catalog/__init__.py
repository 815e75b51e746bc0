"""
storefront_api.catalog

Catalog read-scopes.

Responsibilities:
- Build role-aware product queries (visibility of deleted/discontinued products).
"""

# Package marker.
