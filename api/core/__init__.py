"""
Building blocks shared by the tutorial and weather features.

Settings, logging setup, the asyncpg pool and the JSON error envelope live
here. Tutorial SQL and request handling stay in `tutorials/`.
"""
