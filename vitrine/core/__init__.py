"""
Core utilities shared across the Vitrine admin panel.

This package hosts configuration helpers (env vars, storage paths),
password verification, the login rate limiter and the HTTP middlewares
(sessions, security headers).
"""
