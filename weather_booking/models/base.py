from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Alembic autogenerate and the test fixtures both read table metadata from
    this base.
    """

    pass
