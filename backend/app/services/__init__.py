"""Services Layer — invoice write pipeline and dashboard read queries.

Invariants:
    - Services talk to the store only through core/repository_protocols.py
    - One service class per side: InvoiceActions (writes), InvoiceQueries (reads)

Design Decisions:
    - Services constructed per request by api/dependencies.py
"""
