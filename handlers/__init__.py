"""
handlers/ - Presentation Layer
================================
Flask blueprints. Each handler validates the request, delegates to the
NeighborhoodRepository, and renders the JSON response.
Failures are raised as NeighborhoodError and translated to HTTP status
codes in one place (handlers.common).
"""
