# Browser Relay Database Package

from .connection import check_db_connection, create_db_engine, init_db
from .models import Base, ConsoleLog

__all__ = [
    "check_db_connection",
    "create_db_engine",
    "init_db",
    "Base",
    "ConsoleLog",
]
