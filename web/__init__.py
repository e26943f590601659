"""
Web application package for the Gobblet engine.

Provides a FastAPI-based JSON API for playing against the engine from a
browser or any HTTP client.
"""
