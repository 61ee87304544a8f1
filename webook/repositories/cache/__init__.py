"""Redis-backed caches: verification codes and user snapshots."""
