"""Concurrent enrichment of a person's name across the three classifiers."""

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from personapi.config import (
    DEFAULT_ENRICH_TIMEOUT_SECONDS,
    ENRICH_POLICIES,
    Settings,
    get_settings,
)
from personapi.enrichment.classifiers import Classifier, default_classifiers
from personapi.errors import ClassifierError, EnrichmentError, ValidationError
from personapi.logging import get_logger
from personapi.models import Person

logger = get_logger(__file__)


@dataclass
class EnrichmentOutcome:
    """Fields gathered by one fan-out plus every failure, in completion order."""

    age: Optional[int] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    errors: list[ClassifierError] = field(default_factory=list)

    @property
    def error(self) -> Optional[ClassifierError]:
        """The first failure to complete, if any call failed."""

        return self.errors[0] if self.errors else None

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_error(self) -> None:
        if self.errors:
            raise EnrichmentError(self.errors) from self.errors[0]

    def apply_to(self, person: Person) -> Person:
        return person.with_changes(
            {"age": self.age, "gender": self.gender, "nationality": self.nationality}
        )


class EnrichmentService:
    """Fan a name out to every classifier and join on all of them.

    Each classifier call runs on its own worker thread and returns its own
    value; nothing is shared between the calls, so the join needs no lock.
    The join always waits for every call, so a fast failure never abandons a
    request that is still in flight.

    ``policy`` decides what a failure means for the caller:

    ``"strict"``
        Any failed call makes :meth:`enrich` raise :class:`EnrichmentError`,
        discarding the fields the other calls produced.
    ``"partial"``
        :meth:`enrich` returns whatever succeeded and logs the failures.
    """

    def __init__(
        self,
        classifiers: Sequence[Classifier],
        *,
        timeout: float = DEFAULT_ENRICH_TIMEOUT_SECONDS,
        policy: str = "strict",
    ):
        if policy not in ENRICH_POLICIES:
            raise ValueError(f"unknown enrichment policy: {policy!r}")
        self.classifiers = tuple(classifiers)
        self.timeout = timeout
        self.policy = policy

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "EnrichmentService":
        settings = settings or get_settings()
        return cls(
            default_classifiers(
                agify_url=settings.agify_url,
                genderize_url=settings.genderize_url,
                nationalize_url=settings.nationalize_url,
            ),
            timeout=settings.enrich_timeout_seconds,
            policy=settings.enrich_policy,
        )

    def fan_out(self, name: str) -> EnrichmentOutcome:
        """Query every classifier concurrently; never raises for call failures."""

        if not name or not name.strip():
            raise ValidationError("name is required for enrichment")

        outcome = EnrichmentOutcome()
        with ThreadPoolExecutor(
            max_workers=len(self.classifiers), thread_name_prefix="enrich"
        ) as pool:
            futures: dict[Future, Classifier] = {
                pool.submit(classifier.fetch, name, timeout=self.timeout): classifier
                for classifier in self.classifiers
            }
            # Running requests.get calls cannot be cancelled, so the join lasts as
            # long as the slowest call, which its per-call timeout caps.
            for future in as_completed(futures):
                classifier = futures[future]
                try:
                    value = future.result()
                except ClassifierError as exc:
                    logger.warning("%s failed for %r: %s", classifier.name, name, exc.reason)
                    outcome.errors.append(exc)
                    continue
                setattr(outcome, classifier.field, value)
        return outcome

    def enrich(self, name: str) -> EnrichmentOutcome:
        """Fan out for ``name`` and apply the failure policy."""

        outcome = self.fan_out(name)
        if outcome.ok:
            return outcome
        if self.policy == "partial":
            logger.warning(
                "enrichment of %r partially failed (%s); keeping successful fields",
                name,
                _describe(outcome.errors),
            )
            return outcome
        outcome.raise_for_error()
        return outcome  # pragma: no cover - raise_for_error always raises here


def _describe(errors: Iterable[ClassifierError]) -> str:
    return ", ".join(f"{e.classifier}: {e.reason}" for e in errors)
