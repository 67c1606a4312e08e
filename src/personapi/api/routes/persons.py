from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response

from personapi.api.models.person import PersonCreate, PersonPage, PersonRead, PersonUpdate
from personapi.errors import (
    EnrichmentError,
    PersonNotFoundError,
    StorageError,
    ValidationError,
)
from personapi.logging import get_logger
from personapi.models import (
    MAX_AGE,
    MAX_PAGE,
    MAX_PAGE_SIZE,
    MAX_PERSON_ID,
    CreatePersonCommand,
    PersonQuery,
    UpdatePersonCommand,
)
from personapi.services import PersonService

logger = get_logger(__file__)

router = APIRouter(prefix="/persons", tags=["persons"])


def get_person_service(request: Request) -> PersonService:
    """FastAPI dependency returning the service wired in ``create_app``."""

    return request.app.state.person_service


def _not_found(exc: PersonNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail="person not found")


def _storage_failure(exc: StorageError, action: str) -> HTTPException:
    logger.error("could not %s: %s", action, exc)
    return HTTPException(status_code=500, detail=f"could not {action}")


@router.get("", response_model=PersonPage)
@router.get("/", response_model=PersonPage, include_in_schema=False)
def list_persons(
    page: int = Query(default=1, ge=1, le=MAX_PAGE),
    page_size: int = Query(default=10, ge=1, le=MAX_PAGE_SIZE),
    name: str | None = None,
    surname: str | None = None,
    gender: str | None = None,
    nationality: str | None = None,
    min_age: int | None = Query(default=None, ge=0, le=MAX_AGE),
    max_age: int | None = Query(default=None, ge=0, le=MAX_AGE),
    service: PersonService = Depends(get_person_service),
):
    """Paginated list of persons with optional filters."""

    query = PersonQuery(
        name=name or None,
        surname=surname or None,
        gender=gender or None,
        nationality=nationality or None,
        min_age=min_age,
        max_age=max_age,
        page=page,
        page_size=page_size,
    )
    try:
        paged = service.list_persons(query)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except StorageError as exc:
        raise _storage_failure(exc, "list persons") from exc
    return PersonPage.from_paged(paged)


@router.get("/{person_id}", response_model=PersonRead)
def read_person(
    person_id: int,
    service: PersonService = Depends(get_person_service),
):
    if not 1 <= person_id <= MAX_PERSON_ID:
        raise HTTPException(status_code=400, detail="invalid id")
    try:
        person = service.get_person(person_id)
    except PersonNotFoundError as exc:
        raise _not_found(exc) from exc
    except StorageError as exc:
        raise _storage_failure(exc, "get person") from exc
    return PersonRead.from_person(person)


@router.post("", response_model=PersonRead, status_code=201)
@router.post("/", response_model=PersonRead, status_code=201, include_in_schema=False)
def create_person(
    payload: PersonCreate,
    service: PersonService = Depends(get_person_service),
):
    """Create a person, enriching age, gender and nationality from the name."""

    cmd = CreatePersonCommand(
        name=payload.name, surname=payload.surname, patronymic=payload.patronymic
    )
    try:
        person = service.create_person(cmd)
    except EnrichmentError as exc:
        logger.error("could not enrich %r: %s", payload.name, exc)
        raise HTTPException(status_code=502, detail="could not enrich person") from exc
    except StorageError as exc:
        raise _storage_failure(exc, "create person") from exc
    return PersonRead.from_person(person)


@router.put("/{person_id}", response_model=PersonRead)
def update_person(
    person_id: int,
    payload: PersonUpdate,
    service: PersonService = Depends(get_person_service),
):
    """Update any subset of a person's fields."""

    if not 1 <= person_id <= MAX_PERSON_ID:
        raise HTTPException(status_code=400, detail="invalid id")
    cmd = UpdatePersonCommand.from_mapping(payload.model_dump(exclude_unset=True))
    try:
        person = service.update_person(person_id, cmd)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersonNotFoundError as exc:
        raise _not_found(exc) from exc
    except StorageError as exc:
        raise _storage_failure(exc, "update person") from exc
    return PersonRead.from_person(person)


@router.delete("/{person_id}", status_code=204, response_class=Response)
def delete_person(
    person_id: int,
    service: PersonService = Depends(get_person_service),
):
    if not 1 <= person_id <= MAX_PERSON_ID:
        raise HTTPException(status_code=400, detail="invalid id")
    try:
        service.delete_person(person_id)
    except PersonNotFoundError as exc:
        raise _not_found(exc) from exc
    except StorageError as exc:
        raise _storage_failure(exc, "delete person") from exc
    return Response(status_code=204)
