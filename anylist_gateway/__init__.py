"""
AnyList Gateway - Application Package
=====================================

What:  A small HTTP/JSON façade over an account-bound grocery and recipe list
       client library.

    ┌─────────────────────────────────────┐
    │       Middleware (IP filter, logs)  │  ← every request
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns, validation
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← list / recipe operations
    ├─────────────────────────────────────┤
    │     ListClient (external library)   │  ← login, sync, persistence
    └─────────────────────────────────────┘

The gateway stores nothing itself; every request logs in, acts, and closes the
client session.
"""

__version__ = "1.0.0"
