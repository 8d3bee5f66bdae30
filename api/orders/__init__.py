"""
Orders CRUD: the only validated, writable resource.
"""
