# Services package init
"""
WeatherNotes — Services Layer
==============================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP and sessions; services handle the rules.

Service Inventory:
    - passwords:      hash_password / verify_password (bcrypt)
    - AuthService:    register, login, and the Session Identity lifecycle
    - NoteService:    owner-scoped CRUD over notes
    - WeatherService: current conditions from WeatherAPI.com
    - page_service:   render context of the main notes page

All services are stateless singletons: per-request data arrives as arguments
(db session, user identity) and is never stored on the instance.
"""
