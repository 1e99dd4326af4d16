from .base import GUID, Base, BaseModel, TimeStamp

__all__ = [
    "GUID",
    "Base",
    "BaseModel",
    "TimeStamp",
]
