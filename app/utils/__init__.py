# app/utils/__init__.py

"""
Helpers without database access.
"""
