"""
Post Sync

A migration toolkit for copying blog posts between no-code backend (NCB)
instances.

Supports:
- Table-driven normalization of loosely-shaped legacy rows
- Slug-based deduplication against the destination instance
- Dry runs that report what would be created without writing
- An HTTP surface mirroring the site's serverless functions
- Content helpers for slugs, dates, HTML and Dropbox media links
"""

__version__ = "0.1.0"
