"""
Adoption listings: ownership-checked CRUD over the storage gateway.
"""
