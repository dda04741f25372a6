"""
Database module for Qanda backend
"""

from .connection import get_async_session, init_database

__all__ = ["get_async_session", "init_database"]
