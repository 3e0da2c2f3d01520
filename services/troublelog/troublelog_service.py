"""
services/troublelog/troublelog_service.py
-----------------------------------------
Base service bound to the ``troublelog`` database.
"""

from typing import Optional

from db.connection import ConnectionRegistry
from services.database_service import DatabaseService

DB_NAME = "troublelog"


class TroublelogService(DatabaseService):
    """Shared base for troublelog read and write services."""

    def __init__(self, debug_mode: bool = False, registry: Optional[ConnectionRegistry] = None):
        super().__init__(DB_NAME, debug_mode, registry)
