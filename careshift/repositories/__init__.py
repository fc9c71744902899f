"""
Store interfaces over the relational database

Each repository wraps the request's session. Repositories add and flush;
committing is left to the service that owns the unit of work.
"""

from careshift.repositories.users import UserStore
from careshift.repositories.locations import LocationRegistry
from careshift.repositories.shifts import ShiftStore

__all__ = ["UserStore", "LocationRegistry", "ShiftStore"]
