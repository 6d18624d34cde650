"""Invoice Dashboard Application Package — invoices and customers over raw SQL.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
