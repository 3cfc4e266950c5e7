"""
db/ - Database Layer
====================
Handles PostgreSQL connection pooling, the startup readiness wait, and
schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers.
"""
