"""API Layer — FastAPI routes, dependencies, and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Reads return JSON; form actions return redirects, field errors, or messages

Design Decisions:
    - Thin routes delegate to services and only translate outcomes to HTTP
"""
