# Routes package init
"""
WeatherNotes — Routes Package
==============================

Route Inventory:
    - pages.py:   GET /, GET|POST /login, GET|POST /register, GET /logout
    - notes.py:   GET /app, POST /submit, POST /app-edit,
                  POST /app-update, POST /app-delete
    - health.py:  GET /health

Design Principle:
    Routes are THIN: read the form, resolve the session, call a service,
    render a template or redirect. Business rules live in services.
"""
