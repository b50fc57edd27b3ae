"""
API Package
FastAPI application, routers and request handling.
"""
