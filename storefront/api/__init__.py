"""HTTP API package.

Contains the FastAPI routes, the quotation orchestrator they delegate to and
user-facing error messages.
"""
