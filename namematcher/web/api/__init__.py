"""FastAPI application exposing add and match routes."""

from .main import create_app

__all__ = ['create_app']
