"""Middleware modules for the FastAPI application."""

from waitlist.middleware.request_context import RequestContextMiddleware, request_id_var

__all__ = ["RequestContextMiddleware", "request_id_var"]
