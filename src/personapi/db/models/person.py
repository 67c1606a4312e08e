from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin


class PersonRecord(TimestampMixin, Base):
    __tablename__ = "persons"
    __table_args__ = (
        CheckConstraint("age IS NULL OR age >= 0", name="ck_persons_age_non_negative"),
        {"sqlite_autoincrement": True},
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    surname: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    patronymic: Mapped[str | None] = mapped_column(Text, nullable=True)
    age: Mapped[int | None] = mapped_column(Integer, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(16), nullable=True)
    nationality: Mapped[str | None] = mapped_column(String(2), nullable=True)

    def __repr__(self) -> str:
        return f"PersonRecord(id={self.id!r}, name={self.name!r}, surname={self.surname!r})"
