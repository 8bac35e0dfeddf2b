"""FastAPI routers for the worker.

Mounted under ``/api`` by ``create_app``.
"""
