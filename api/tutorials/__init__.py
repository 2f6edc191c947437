"""
The tutorial feature: schemas, persistence, business rules and routes.
"""
