"""
Base class shared by all translators.

A translator is configured once (caller name, lookup tables, diagnostic sink)
and then maps source resources to target manifests with ``translate``. It
keeps no state between calls.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any

from ocp_translate.models.kubernetes import ObjectMeta
from ocp_translate.translate.annotations import AnnotationRecorder, FieldFact

logger = logging.getLogger(__name__)

DEFAULT_NAME = "ocp-translate"


class BaseTranslator(ABC):
    """
    Abstract base class for translators.

    Subclasses set ``source_kind``, provide their unsupported-field table
    through ``default_facts`` and implement ``translate``.

    Args:
        name: Caller name, used to namespace diagnostic annotation keys and
            to prefix log messages
        log: Diagnostic sink; only ever written to
        facts: Replacement for the default unsupported-field table
    """

    source_kind: str = ""

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        facts: Iterable[FieldFact] | None = None,
    ):
        self.name = name
        self.log = log or logger
        self.facts = tuple(self.default_facts() if facts is None else facts)
        self.recorder = AnnotationRecorder(name, self.source_kind, self.facts, self.log)

    @classmethod
    def default_facts(cls) -> tuple[FieldFact, ...]:
        """Return the unsupported-field table used when none is given."""
        return ()

    @abstractmethod
    def translate(self, *sources: Any) -> Any:
        """Translate source resources into a result holding the target manifests."""
        pass

    def build_metadata(
        self,
        meta: ObjectMeta,
        name: str | None = None,
        annotations: dict[str, str] | None = None,
        labels: bool = True,
    ) -> dict[str, Any]:
        """
        Build target ``metadata`` from source metadata.

        Empty namespace, labels and annotations are left out.
        """
        metadata: dict[str, Any] = {"name": name or meta.name}
        if meta.namespace:
            metadata["namespace"] = meta.namespace
        if labels and meta.labels:
            metadata["labels"] = dict(meta.labels)
        if annotations:
            metadata["annotations"] = dict(annotations)
        return metadata
