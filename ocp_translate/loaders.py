"""
Loading source manifests and serializing translated ones.

Source files may be YAML (one or more documents) or JSON, and may wrap their
items in a ``kind: List`` document as ``oc get -o yaml`` does.
"""

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml

from ocp_translate.exceptions import LoadError, SourceFormatError
from ocp_translate.models.kubernetes import Ingress, Service
from ocp_translate.models.openshift import DeploymentConfig, Route, SecurityContextConstraints

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)

MODELS = {
    model.KIND: model
    for model in (Route, Service, SecurityContextConstraints, DeploymentConfig, Ingress)
}


def load_documents(path: str | Path) -> list[dict[str, Any]]:
    """
    Read all manifest documents from a YAML or JSON file.

    Args:
        path: Manifest file

    Returns:
        Documents in file order, with List wrappers flattened

    Raises:
        LoadError: File missing, unreadable, of unknown type or unparseable
    """
    file_path = Path(path)
    suffix = file_path.suffix.lower()
    if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
        raise LoadError(str(file_path), f"unsupported file type '{suffix or '(none)'}'")

    try:
        text = file_path.read_text()
    except OSError as e:
        raise LoadError(str(file_path), e.strerror or str(e)) from e

    try:
        if suffix in JSON_SUFFIXES:
            raw = [json.loads(text)]
        else:
            raw = list(yaml.safe_load_all(text))
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise LoadError(str(file_path), f"parse error: {e}") from e

    documents = []
    for doc in raw:
        if doc is None:
            continue
        if not isinstance(doc, dict):
            raise LoadError(str(file_path), f"expected a mapping, got {type(doc).__name__}")
        documents.extend(_flatten(doc))

    logger.debug(f"Loaded {len(documents)} document(s) from {file_path}")
    return documents


def _flatten(doc: dict[str, Any]) -> list[dict[str, Any]]:
    # List, RouteList, ServiceList, ...
    if str(doc.get("kind", "")).endswith("List") and isinstance(doc.get("items"), list):
        return [item for item in doc["items"] if isinstance(item, dict)]
    return [doc]


def parse_resource(document: dict[str, Any]) -> Any:
    """
    Parse a manifest document into its model, chosen by ``kind``.

    Raises:
        SourceFormatError: The kind is missing or not handled
    """
    kind = document.get("kind")
    model = MODELS.get(kind)
    if model is None:
        raise SourceFormatError(str(kind or "resource"), "unsupported or missing kind")
    return model.from_dict(document)


def find_resource(documents: Iterable[dict[str, Any]], kind: str, name: str | None = None) -> Any:
    """
    Pick one resource of *kind* (and *name*, if given) from *documents*.

    Raises:
        SourceFormatError: No matching document, or several when no name is given
    """
    matches = [
        d
        for d in documents
        if d.get("kind") == kind
        and (name is None or (d.get("metadata") or {}).get("name") == name)
    ]
    if not matches:
        wanted = f"{kind} named '{name}'" if name else f"any {kind}"
        raise SourceFormatError(kind, f"{wanted} not found")
    if len(matches) > 1 and name is None:
        names = ", ".join(str((d.get("metadata") or {}).get("name")) for d in matches)
        raise SourceFormatError(kind, f"several found ({names}), select one by name")
    return MODELS[kind].from_dict(matches[0])


def load_resource(path: str | Path, kind: str, name: str | None = None) -> Any:
    """Load the single *kind* resource (optionally by *name*) from a file."""
    return find_resource(load_documents(path), kind, name)


def dump_manifests(resources: Iterable[dict[str, Any]]) -> str:
    """
    Render target manifests as one multi-document YAML stream.

    Key order is preserved so output is stable across runs.
    """
    return yaml.safe_dump_all(
        list(resources), default_flow_style=False, sort_keys=False, explicit_start=True
    )


def manifest_filename(resource: dict[str, Any]) -> str:
    """Return ``<kind>-<name>.yaml`` for a manifest, lowercased and path-safe."""
    kind = resource.get("kind", "resource").lower()
    name = resource.get("metadata", {}).get("name", "unnamed").replace(":", "-").replace("/", "-")
    return f"{kind}-{name}.yaml"


def write_manifests(resources: Iterable[dict[str, Any]], out_dir: str | Path) -> list[Path]:
    """
    Write each manifest to its own file under *out_dir*.

    Returns:
        Paths written, in resource order
    """
    directory = Path(out_dir)
    directory.mkdir(parents=True, exist_ok=True)
    written = []
    for resource in resources:
        path = directory / manifest_filename(resource)
        path.write_text(dump_manifests([resource]))
        written.append(path)
    return written
