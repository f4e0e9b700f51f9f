"""
Request dependencies shared by the API routers.

- deps: Per-request repository bundle
- auth: Bearer-token authentication and role guards
- pagination: ``page`` / ``limit`` query parameters
"""
