"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (settings, the
DB pool and query helpers, logging setup, pagination). Keep feature SQL and
business logic in the feature package (e.g. `places/`).
"""
