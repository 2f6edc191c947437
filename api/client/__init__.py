"""
Python client for the tutorial API, with a time-expiring category cache and
view helpers (filtering, paging, dashboard and analytics aggregates).
"""
