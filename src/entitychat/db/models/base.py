# Shared SQLAlchemy base classes for business objects
from sqlalchemy import Integer
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    __table_args__ = {"sqlite_autoincrement": True}


class BusinessObject(Base):
    """Abstract base carrying the infrastructure fields every record has.

    ``optimistic_lock_field`` and ``gc_record`` mirror the concurrency token and
    soft-delete marker of the host application framework. Schema discovery
    never exposes them.
    """

    __abstract__ = True

    id: Mapped[int] = mapped_column(primary_key=True)
    optimistic_lock_field: Mapped[int | None] = mapped_column(Integer, default=0, nullable=True)
    gc_record: Mapped[int | None] = mapped_column(Integer, default=None, nullable=True)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
