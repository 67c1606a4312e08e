# personapi/api/models/person.py
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from personapi.models import (
    GENDERS,
    MAX_AGE,
    NAME_PATTERN,
    NATIONALITY_PATTERN,
    PagedPersons,
    Person,
)


def _check_letters(value: str, label: str) -> str:
    if not NAME_PATTERN.match(value):
        raise ValueError(f"{label} must contain only letters")
    return value


class PersonCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1, max_length=256)
    surname: str = Field(min_length=1, max_length=256)
    patronymic: str | None = Field(default=None, max_length=256)

    @field_validator("name", "surname")
    @classmethod
    def _letters_only(cls, value: str, info) -> str:
        return _check_letters(value, info.field_name)

    @field_validator("patronymic")
    @classmethod
    def _optional_letters(cls, value: str | None) -> str | None:
        if not value:
            return None
        return _check_letters(value, "patronymic")


class PersonUpdate(BaseModel):
    """Sparse patch body; only keys present in the JSON are applied."""

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=256)
    surname: str | None = Field(default=None, max_length=256)
    patronymic: str | None = Field(default=None, max_length=256)
    age: int | None = Field(default=None, ge=0, le=MAX_AGE)
    gender: str | None = None
    nationality: str | None = None

    @field_validator("name", "surname")
    @classmethod
    def _required_letters(cls, value: str | None, info) -> str:
        if value is None:
            raise ValueError(f"{info.field_name} cannot be null")
        return _check_letters(value, info.field_name)

    @field_validator("patronymic")
    @classmethod
    def _optional_letters(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _check_letters(value, "patronymic")

    @field_validator("gender")
    @classmethod
    def _known_gender(cls, value: str | None) -> str | None:
        if value is not None and value not in GENDERS:
            raise ValueError("gender must be 'male' or 'female'")
        return value

    @field_validator("nationality")
    @classmethod
    def _country_code(cls, value: str | None) -> str | None:
        if value is not None and not NATIONALITY_PATTERN.match(value):
            raise ValueError("nationality must be a 2-letter country code")
        return value


class PersonRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    surname: str
    patronymic: str | None = None
    age: int | None = None
    gender: str | None = None
    nationality: str | None = None
    created_at: datetime | None = None

    @classmethod
    def from_person(cls, person: Person) -> "PersonRead":
        return cls.model_validate(person)


class PersonPage(BaseModel):
    persons: list[PersonRead]
    total: int
    page: int
    page_size: int

    @classmethod
    def from_paged(cls, paged: PagedPersons) -> "PersonPage":
        return cls(
            persons=[PersonRead.from_person(p) for p in paged.persons],
            total=paged.total,
            page=paged.page,
            page_size=paged.page_size,
        )
