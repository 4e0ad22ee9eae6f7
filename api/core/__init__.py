"""
Shared, cross-cutting code for the API.

`core/` should contain small building blocks that multiple features use
(DB wiring, settings, errors, logging). Keep feature-specific business logic
in the corresponding feature package (e.g. `listings/`); SQL lives behind
the `storage` gateway.
"""
