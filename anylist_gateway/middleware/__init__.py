# Middleware package init
"""
AnyList Gateway - Middleware Package
====================================

Middleware Chain:
    Request → [IP Filter] → [Request ID] → [Logging] → Route Handler

    1. IP Filter first: rejected sources never reach logging or the list client
    2. Request ID: correlation ID for every log line of the request
    3. Logging: method, path, status and duration, tagged with the request ID

Responses travel the chain in reverse, so the X-Request-ID header is set
before the access line is written.
"""
