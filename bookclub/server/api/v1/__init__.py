"""
Version 1 route handlers.

- health: /health and /version
- users: registration, user lookup, admin creation and the caller's profile
- tokens: login and logout
- books: book catalogue
- chapters: chapters and their comments
- user_books: the caller's shelf and reading progress
"""
