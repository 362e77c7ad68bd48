"""Database base classes and models."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


# Import models so create_all sees every table
import subledger.db.models.subscription  # noqa: F401,E402
