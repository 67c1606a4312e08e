"""Exception hierarchy shared by the service, storage and API layers."""

from __future__ import annotations

from typing import Sequence


class PersonAPIError(Exception):
    """Base class for every error raised by personapi."""


class ValidationError(PersonAPIError, ValueError):
    """Input is malformed or missing a required value."""


class ClassifierError(PersonAPIError):
    """A single call to a name classifier failed."""

    def __init__(self, classifier: str, url: str, reason: str):
        self.classifier = classifier
        self.url = url
        self.reason = reason
        super().__init__(f"{classifier} request to {url} failed: {reason}")


class ClassifierTransportError(ClassifierError):
    """DNS, connection or timeout failure."""


class ClassifierStatusError(ClassifierError):
    def __init__(self, classifier: str, url: str, status_code: int):
        self.status_code = status_code
        super().__init__(classifier, url, f"status {status_code}")


class ClassifierResponseError(ClassifierError):
    """The classifier answered 2xx with a body we could not decode."""


class EnrichmentError(PersonAPIError):
    """Enrichment failed; ``errors`` lists every failed call by completion order."""

    def __init__(self, errors: Sequence[ClassifierError]):
        if not errors:
            raise ValueError("EnrichmentError requires at least one classifier error")
        self.errors = list(errors)
        first = self.errors[0]
        message = f"enrichment failed: {first}"
        if len(self.errors) > 1:
            message += f" (+{len(self.errors) - 1} more)"
        super().__init__(message)

    @property
    def first(self) -> ClassifierError:
        return self.errors[0]


class PersonNotFoundError(PersonAPIError, LookupError):
    def __init__(self, person_id: int):
        self.person_id = person_id
        super().__init__(f"person {person_id} not found")


class StorageError(PersonAPIError):
    """Any persistence failure other than a missing record."""


__all__ = [
    "PersonAPIError",
    "ValidationError",
    "ClassifierError",
    "ClassifierTransportError",
    "ClassifierStatusError",
    "ClassifierResponseError",
    "EnrichmentError",
    "PersonNotFoundError",
    "StorageError",
]
