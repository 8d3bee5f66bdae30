"""
Read-only pass-through listings (student, foods).
"""
