"""
handlers/ - Presentation Layer
================================
FastAPI routers. Each handler receives an HTTP request, delegates to
the appropriate Service, and serializes the response.
No business logic lives here.
"""
