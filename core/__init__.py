"""Core (UI-agnostic) dictionary logic.

This package contains:
- sheet fetching (CSV export -> text)
- CSV parsing into dictionary entries
- search filter normalization
- application state (bookmarks, daily word, settings)
"""
