"""
API v1 router exports.
Provides API endpoint routers.
"""
from app.api.v1 import chats, functions

__all__ = [
    "chats",
    "functions",
]
