from repositories.base import FleetStore
from repositories.memory import InMemoryFleetStore
from repositories.sql import SqlFleetStore

__all__ = ["FleetStore", "InMemoryFleetStore", "SqlFleetStore"]
