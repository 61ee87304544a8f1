"""
Persistence adapters.

``user_dao`` talks to the SQL database, ``cache`` talks to Redis and
``user_repository`` merges both behind the interface services depend on.
"""
