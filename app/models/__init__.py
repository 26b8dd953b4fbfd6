"""
Database models
"""

from app.models.file_node import FileNode

__all__ = ["FileNode"]
