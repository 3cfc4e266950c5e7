"""
repositories/ - Data Access Layer
==================================
The repository owns the connection pool and every SQL statement.
It returns domain model objects and raises NeighborhoodError; it never
formats responses.
"""
