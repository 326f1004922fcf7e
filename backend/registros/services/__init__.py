# Services package init
"""
Registros API - Services Layer
===============================

What:  The storage adapter sitting between routes (HTTP) and the database.

Service Inventory:
    - RecordStore: list / get / insert / update / delete over the `registros` table
"""
