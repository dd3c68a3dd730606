"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (settings, DB
wiring, error envelopes, logging). Feature-specific SQL and business logic
belong in the feature package (e.g. `persons/`).
"""
