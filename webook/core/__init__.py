"""
Core utilities shared across the webook API.

This package hosts configuration, logging setup, the error taxonomy, password
hashing, JWT claims and the Redis client factory. Services and repositories
depend on these primitives instead of reading os.environ or building clients
themselves.
"""
