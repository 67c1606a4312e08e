"""Demographic enrichment of names via external classifiers."""

from .classifiers import Classifier, default_classifiers
from .service import EnrichmentOutcome, EnrichmentService

__all__ = ["Classifier", "default_classifiers", "EnrichmentOutcome", "EnrichmentService"]
