"""Person use cases: enrich-then-persist on create, sparse patch on update."""

from __future__ import annotations

from typing import Protocol

from personapi.enrichment import EnrichmentOutcome
from personapi.errors import ValidationError
from personapi.logging import get_logger
from personapi.models import (
    MAX_AGE,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    CreatePersonCommand,
    ListParams,
    PagedPersons,
    PagedResult,
    Person,
    PersonQuery,
    UpdatePersonCommand,
)

logger = get_logger(__file__)


class PersonStorage(Protocol):
    """Persistence collaborator; see :class:`personapi.db.PersonStore`."""

    def create(self, person: Person) -> Person: ...

    def update(self, person_id: int, person: Person) -> Person: ...

    def delete(self, person_id: int) -> None: ...

    def get(self, person_id: int) -> Person: ...

    def list(self, params: ListParams) -> PagedResult: ...


class Enricher(Protocol):
    def enrich(self, name: str) -> EnrichmentOutcome: ...


class PersonService:
    def __init__(self, enricher: Enricher, store: PersonStorage):
        self.enricher = enricher
        self.store = store

    def create_person(self, cmd: CreatePersonCommand) -> Person:
        """Enrich the new person by name, then persist it.

        Nothing is stored when enrichment raises.
        """

        logger.info("CreatePerson name=%r surname=%r", cmd.name, cmd.surname)
        person = Person(name=cmd.name, surname=cmd.surname, patronymic=cmd.patronymic)
        outcome = self.enricher.enrich(cmd.name)
        return self.store.create(outcome.apply_to(person))

    def update_person(self, person_id: int, cmd: UpdatePersonCommand) -> Person:
        """Overwrite only the fields present in ``cmd``; no re-enrichment."""

        changes = cmd.changes()
        logger.info("UpdatePerson id=%s fields=%s", person_id, sorted(changes))
        if not changes:
            raise ValidationError("no fields to update")
        current = self.store.get(person_id)
        return self.store.update(person_id, current.with_changes(changes))

    def delete_person(self, person_id: int) -> None:
        logger.info("DeletePerson id=%s", person_id)
        self.store.delete(person_id)

    def get_person(self, person_id: int) -> Person:
        logger.info("GetPersonByID id=%s", person_id)
        return self.store.get(person_id)

    def list_persons(self, query: PersonQuery) -> PagedPersons:
        logger.info("ListPersons %s", query)
        if query.page < 1 or query.page_size < 1:
            raise ValidationError("page and page_size must be positive")
        if query.page > MAX_PAGE or query.page_size > MAX_PAGE_SIZE:
            raise ValidationError(
                f"page must be at most {MAX_PAGE} and page_size at most {MAX_PAGE_SIZE}"
            )
        for bound in (query.min_age, query.max_age):
            if bound is not None and not 0 <= bound <= MAX_AGE:
                raise ValidationError(f"age bounds must be between 0 and {MAX_AGE}")
        result = self.store.list(query.to_list_params())
        return PagedPersons(
            persons=result.items,
            total=result.total,
            page=query.page,
            page_size=query.page_size,
        )
