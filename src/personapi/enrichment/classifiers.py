"""Name classifiers queried during enrichment and their response parsers.

Every classifier is a plain ``GET <base_url>?name=<name>`` returning JSON:

- agify: ``{"age": 25}``
- genderize: ``{"gender": "male"}``
- nationalize: ``{"country": [{"country_id": "GB", "probability": 0.5}, ...]}``

A JSON ``null`` for age or gender means the classifier had no guess; the
field stays absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests

from personapi.errors import (
    ClassifierResponseError,
    ClassifierStatusError,
    ClassifierTransportError,
)
from personapi.models import GENDERS


class MalformedResponse(ValueError):
    """Raised by a parser when the payload does not have the expected shape."""


def parse_age(payload: Any) -> Optional[int]:
    if not isinstance(payload, dict) or "age" not in payload:
        raise MalformedResponse("missing 'age'")
    age = payload["age"]
    if age is None:
        return None
    if isinstance(age, bool) or not isinstance(age, int):
        raise MalformedResponse(f"age is not an integer: {age!r}")
    if age < 0:
        raise MalformedResponse(f"age is negative: {age}")
    return age


def parse_gender(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict) or "gender" not in payload:
        raise MalformedResponse("missing 'gender'")
    gender = payload["gender"]
    if gender is None:
        return None
    if gender not in GENDERS:
        raise MalformedResponse(f"unknown gender label: {gender!r}")
    return gender


def parse_nationality(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict) or not isinstance(payload.get("country"), list):
        raise MalformedResponse("missing 'country' list")
    countries = payload["country"]
    if not countries:
        return None
    # the list is ranked, best guess first
    top = countries[0]
    if not isinstance(top, dict) or not isinstance(top.get("country_id"), str):
        raise MalformedResponse(f"bad country entry: {top!r}")
    return top["country_id"]


@dataclass(frozen=True)
class Classifier:
    """One external classifier: which field it fills and how to read it."""

    name: str
    field: str
    base_url: str
    parse: Callable[[Any], Any]

    def fetch(self, person_name: str, *, timeout: float) -> Any:
        """Query the classifier for ``person_name`` and return the parsed value.

        Raises
        ------
        ClassifierTransportError
            Connection, DNS or timeout failure.
        ClassifierStatusError
            Non-2xx response.
        ClassifierResponseError
            Body is not JSON or does not have the expected shape.
        """

        try:
            resp = requests.get(
                self.base_url, params={"name": person_name}, timeout=timeout
            )
        except requests.RequestException as exc:
            raise ClassifierTransportError(
                self.name, self.base_url, f"{type(exc).__name__}: {exc}"
            ) from exc

        if not 200 <= resp.status_code < 300:
            raise ClassifierStatusError(self.name, self.base_url, resp.status_code)

        try:
            return self.parse(resp.json())
        except ValueError as exc:
            # json decode errors and MalformedResponse are both ValueErrors
            raise ClassifierResponseError(self.name, self.base_url, str(exc)) from exc


def default_classifiers(
    *, agify_url: str, genderize_url: str, nationalize_url: str
) -> tuple[Classifier, ...]:
    return (
        Classifier("agify", "age", agify_url, parse_age),
        Classifier("genderize", "gender", genderize_url, parse_gender),
        Classifier("nationalize", "nationality", nationalize_url, parse_nationality),
    )
