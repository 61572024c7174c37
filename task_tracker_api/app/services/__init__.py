"""
Service layer abstraction.

Each service encapsulates business logic for a domain.  Services take
the acting identity explicitly as ``current_user``, validate references,
run their reads and writes through the repositories inside one
transaction, and return read schemas.  Failures are raised as the typed
errors in ``core.errors``; API handlers decide how to present them.
"""
