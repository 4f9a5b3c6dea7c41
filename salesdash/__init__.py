"""Core (UI-agnostic) sales analytics logic.

This package contains:
- date normalization for DD-Mon-YYYY transaction dates
- filter normalization and the record filter
- aggregation functions (JSON-serializable payloads)
- CSV export and the AI-assistant boundary
- chart helpers (Altair -> Vega-Lite spec dict)
"""
