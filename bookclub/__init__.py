"""BookClub API.

Backend for a book club application: members keep a shelf of books with their
reading progress and discuss books chapter by chapter.

Core subpackages
----------------

- ``bookclub.core``:

  - Logging and optional Logfire monitoring.
  - Password hashing and bearer-token primitives.
  - SQLModel entities, repositories and API schemas under ``core.database``.

- ``bookclub.server``:

  - The FastAPI application, routers, auth dependencies, middleware and
    exception handlers.

Typical request flow
--------------------

1. A request hits a router in ``bookclub.server.api.v1``.
2. Dependencies open an ``AsyncSession``, build the repository bundle and
   resolve the bearer token to a user.
3. The handler delegates to a repository and maps domain errors to HTTP codes.
"""

__version__ = "1.0.0"
