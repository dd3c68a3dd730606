"""
Person CRUD feature: schemas, SQL, business rules and HTTP routes.
"""
