"""
API package containing the HTTP routes.
"""
