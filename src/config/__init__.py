from .settings import settings
from .database import async_session_manager, async_session_maker, engine
from .table_names import TableNames

__all__ = [
    "settings",
    "async_session_manager",
    "async_session_maker",
    "engine",
    "TableNames",
]
