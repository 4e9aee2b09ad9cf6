"""
Services Module

Business operations behind the HTTP routers:
- user_service: Identity lifecycle (register, sign-in, profile, admin update, deactivation, listings)
"""
from . import user_service

__all__ = ["user_service"]
