"""
Diagnostic annotations for source fields a translator cannot represent.

Every translator owns a fixed table of FieldFacts. Recording evaluates each
fact against the concrete source resource and emits one annotation
``<name>/<Kind>.<field path>: unsupported`` per fact that fires. Keys that
would not be valid Kubernetes annotation keys are dropped with a warning.
"""

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

UNSUPPORTED = "unsupported"

# Annotation keys are "<prefix>/<name>". The name segment is capped at 63
# characters; the prefix is a DNS subdomain of at most 253.
MAX_KEY_NAME_LENGTH = 63
MAX_KEY_PREFIX_LENGTH = 253

_KEY_NAME_RE = re.compile(r"^([A-Za-z0-9][-A-Za-z0-9_.]*)?[A-Za-z0-9]$")
_KEY_PREFIX_RE = re.compile(r"^[a-z0-9]([-a-z0-9]*[a-z0-9])?(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$")


class FieldFact(NamedTuple):
    """
    A source field and the predicate telling whether it is set but unsupported.

    Attributes:
        field_path: Path below the source kind, e.g. "Spec.WildCardPolicy"
        is_unsupported: Predicate evaluated against the source resource
    """

    field_path: str
    is_unsupported: Callable[[Any], bool]


def always(_source: Any) -> bool:
    """Predicate for fields the translator never supports."""
    return True


def is_valid_key(key: str) -> bool:
    """Return True if *key* is a well-formed Kubernetes annotation key."""
    prefix, sep, name = key.rpartition("/")
    if sep and (len(prefix) > MAX_KEY_PREFIX_LENGTH or not _KEY_PREFIX_RE.match(prefix)):
        return False
    return len(name) <= MAX_KEY_NAME_LENGTH and bool(_KEY_NAME_RE.match(name))


def merge_annotations(
    existing: Mapping[str, str] | None, diagnostics: Mapping[str, str]
) -> dict[str, str]:
    """
    Merge diagnostic annotations into an existing annotation map.

    Existing keys always win: a diagnostic never overwrites a value that is
    already there. Neither argument is modified.
    """
    merged = dict(existing or {})
    for key, value in diagnostics.items():
        merged.setdefault(key, value)
    return merged


class AnnotationRecorder:
    """
    Records unsupported source fields as annotations for one source kind.

    Example:
        >>> recorder = AnnotationRecorder(
        ...     "migrator", "Route", [FieldFact("Spec.Weight", lambda r: r.spec.to.weight)]
        ... )
        >>> recorder.annotation_key("Spec.Weight")
        'migrator/Route.Spec.Weight'
    """

    def __init__(
        self,
        name: str,
        source_kind: str,
        facts: Iterable[FieldFact],
        log: logging.Logger | logging.LoggerAdapter | None = None,
    ):
        self.name = name
        self.source_kind = source_kind
        self.facts = tuple(facts)
        self.log = log or logger

    def annotation_key(self, field_path: str) -> str:
        return f"{self.name}/{self.source_kind}.{field_path}"

    def record(self, source: Any) -> dict[str, str]:
        """
        Evaluate every fact against *source*.

        Args:
            source: The source resource being translated

        Returns:
            Mapping of annotation key to "unsupported" for each fact that fired
        """
        diagnostics: dict[str, str] = {}
        for fact in self.facts:
            if not fact.is_unsupported(source):
                continue

            field_name = f"{self.source_kind}.{fact.field_path}"
            key = self.annotation_key(fact.field_path)
            if not is_valid_key(key):
                self.log.warning(
                    f"[{self.name}] {field_name} is unsupported but '{key}' is not a valid "
                    "annotation key, diagnostic omitted"
                )
                continue

            self.log.warning(f"[{self.name}] {field_name} is unsupported")
            diagnostics[key] = UNSUPPORTED
        return diagnostics

    def annotate(self, source: Any, annotations: Mapping[str, str] | None = None) -> dict[str, str]:
        """Return *annotations* (the source's own by default) plus diagnostics."""
        if annotations is None:
            annotations = source.metadata.annotations
        return merge_annotations(annotations, self.record(source))
