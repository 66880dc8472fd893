"""
Integration tests.

These run the full application stack and use real time. The Redis tests
need a reachable server and are skipped unless USE_REAL_REDIS=1.
"""
