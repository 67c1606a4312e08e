"""SQLAlchemy-backed persistence for :class:`~personapi.models.Person`."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from personapi.db.connect import SessionFactory
from personapi.db.models import PersonRecord
from personapi.errors import PersonNotFoundError, StorageError
from personapi.logging import get_logger
from personapi.models import ListParams, PagedResult, Person

logger = get_logger(__file__)

_COLUMNS = ("name", "surname", "patronymic", "age", "gender", "nationality")


def to_person(record: PersonRecord) -> Person:
    return Person(
        id=record.id,
        name=record.name,
        surname=record.surname,
        patronymic=record.patronymic,
        age=record.age,
        gender=record.gender,
        nationality=record.nationality,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class PersonStore:
    """CRUD and filtered listing over the ``persons`` table.

    Each call runs in its own transaction obtained from ``session_factory``.
    Missing ids raise :class:`PersonNotFoundError`; every other database
    failure surfaces as :class:`StorageError`.
    """

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        try:
            with self.session_factory() as session:
                yield session
        except SQLAlchemyError as exc:
            logger.error("%s failed: %s", action, exc)
            raise StorageError(f"{action} failed: {exc}") from exc

    def _get_record(self, session: Session, person_id: int) -> PersonRecord:
        record = session.get(PersonRecord, person_id)
        if record is None:
            raise PersonNotFoundError(person_id)
        return record

    def create(self, person: Person) -> Person:
        with self._session("create person") as session:
            record = PersonRecord(**{col: getattr(person, col) for col in _COLUMNS})
            session.add(record)
            session.flush()
            session.refresh(record)
            logger.info("Inserted into persons: id=%s", record.id)
            return to_person(record)

    def update(self, person_id: int, person: Person) -> Person:
        with self._session("update person") as session:
            record = self._get_record(session, person_id)
            for col in _COLUMNS:
                setattr(record, col, getattr(person, col))
            session.flush()
            session.refresh(record)
            logger.info("Updated persons: id=%s", person_id)
            return to_person(record)

    def delete(self, person_id: int) -> None:
        with self._session("delete person") as session:
            record = self._get_record(session, person_id)
            session.delete(record)
            logger.info("Deleted from persons: id=%s", person_id)

    def get(self, person_id: int) -> Person:
        with self._session("get person") as session:
            return to_person(self._get_record(session, person_id))

    def count(self, params: ListParams | None = None) -> int:
        """Number of rows matching the filters in ``params`` (all rows if omitted)."""

        conditions = _conditions(params or ListParams())
        with self._session("count persons") as session:
            return _count(session, conditions)

    def list(self, params: ListParams) -> PagedResult:
        conditions = _conditions(params)
        with self._session("list persons") as session:
            total = _count(session, conditions)
            rows = session.scalars(
                select(PersonRecord)
                .where(*conditions)
                .order_by(PersonRecord.id.asc())
                .offset(params.offset)
                .limit(params.limit)
            ).all()
            return PagedResult(items=[to_person(r) for r in rows], total=total)


def _count(session: Session, conditions: list) -> int:
    total = session.scalar(select(func.count()).select_from(PersonRecord).where(*conditions))
    return int(total or 0)


def _conditions(params: ListParams) -> list:
    conditions = []
    if params.name_contains:
        conditions.append(PersonRecord.name.ilike(f"%{params.name_contains}%"))
    if params.surname_contains:
        conditions.append(PersonRecord.surname.ilike(f"%{params.surname_contains}%"))
    if params.gender:
        conditions.append(PersonRecord.gender == params.gender)
    if params.nationality:
        conditions.append(PersonRecord.nationality == params.nationality)
    if params.min_age is not None:
        conditions.append(PersonRecord.age >= params.min_age)
    if params.max_age is not None:
        conditions.append(PersonRecord.age <= params.max_age)
    return conditions
