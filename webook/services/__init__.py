"""
High-level use cases for the webook API.

Each service orchestrates repositories/adapters to implement business rules
(send a login code, sign up, find-or-create by phone, etc.). Routers call
these services instead of touching Redis or the database directly.
"""
