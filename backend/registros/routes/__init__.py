# Routes package init
"""
Registros API - Routes Package
===============================

Route Inventory:
    - records.py: GET/POST /registros, GET/PUT/DELETE /registros/{id}
    - health.py:  GET /health

Routes are thin: read the request, call the RecordStore once, pick the
status code. No route holds state between requests.
"""
