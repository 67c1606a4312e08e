"""Domain types passed between the API, the services and the store."""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Optional

# Latin and Cyrillic letters only; applied to name, surname and patronymic.
NAME_PATTERN = re.compile(r"^[A-Za-zА-Яа-яЁё]+$")
NATIONALITY_PATTERN = re.compile(r"^[A-Z]{2}$")

# Upper bounds keep query and column values inside a 64-bit integer.
MAX_AGE = 200
MAX_PAGE = 1_000_000
MAX_PAGE_SIZE = 100
MAX_PERSON_ID = 2**63 - 1


class Gender(str, enum.Enum):
    male = "male"
    female = "female"


GENDERS = frozenset(g.value for g in Gender)


class _Unset:
    _instance: Optional["_Unset"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _Unset()

PATCHABLE_FIELDS = ("name", "surname", "patronymic", "age", "gender", "nationality")


@dataclass
class Person:
    name: str
    surname: str
    patronymic: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def with_changes(self, changes: dict[str, Any]) -> "Person":
        """Return a copy with the patchable fields in ``changes`` overwritten."""

        unknown = set(changes) - set(PATCHABLE_FIELDS)
        if unknown:
            raise KeyError(f"not patchable: {', '.join(sorted(unknown))}")
        return replace(self, **changes)


@dataclass(frozen=True)
class CreatePersonCommand:
    name: str
    surname: str
    patronymic: Optional[str] = None


@dataclass(frozen=True)
class UpdatePersonCommand:
    """Sparse patch: only fields set to something other than ``UNSET`` apply.

    ``None`` is a real value here and clears an optional field.
    """

    name: Any = UNSET
    surname: Any = UNSET
    patronymic: Any = UNSET
    age: Any = UNSET
    gender: Any = UNSET
    nationality: Any = UNSET

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> "UpdatePersonCommand":
        return cls(**{k: v for k, v in data.items() if k in PATCHABLE_FIELDS})

    def changes(self) -> dict[str, Any]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not UNSET
        }

    def is_empty(self) -> bool:
        return not self.changes()


@dataclass(frozen=True)
class ListParams:
    name_contains: Optional[str] = None
    surname_contains: Optional[str] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    offset: int = 0
    limit: int = 10


@dataclass(frozen=True)
class PersonQuery:
    name: Optional[str] = None
    surname: Optional[str] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    min_age: Optional[int] = None
    max_age: Optional[int] = None
    page: int = 1
    page_size: int = 10

    def to_list_params(self) -> ListParams:
        """Translate the 1-based page window into an offset/limit pair."""

        return ListParams(
            name_contains=self.name,
            surname_contains=self.surname,
            gender=self.gender,
            nationality=self.nationality,
            min_age=self.min_age,
            max_age=self.max_age,
            offset=self.page_size * (self.page - 1),
            limit=self.page_size,
        )


@dataclass
class PagedResult:
    """What the store hands back from a filtered listing."""

    items: list[Person]
    total: int


@dataclass
class PagedPersons:
    persons: list[Person] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10
