"""
BookClub HTTP server.

- main: FastAPI application (middleware, exception handlers, routers)
- api/v1: Route handlers
- services: Request dependencies (repositories, authentication, pagination)
- core: Settings and constants
"""
