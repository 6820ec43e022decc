"""
Agro Koi store backend test suite.

- unit:        validators, hashing, token helpers, rate limiter
- api:         endpoints through the ASGI app with httpx
- integration: ORM models against in-memory SQLite
"""
