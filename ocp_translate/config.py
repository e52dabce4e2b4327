"""
Translator configuration.

Every lookup table and naming convention the translators use can be set here
and is passed explicitly to each translator's constructor. Defaults reproduce
the behavior of the built-in tables.
"""

import json
import logging
import re
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validate

from ocp_translate.exceptions import InvalidConfigError
from ocp_translate.translate.base import DEFAULT_NAME
from ocp_translate.translate.deploymentconfig import DeploymentConfigTranslator
from ocp_translate.translate.ingress import IngressTranslator
from ocp_translate.translate.route import RouteTranslator
from ocp_translate.translate.scc import DEFAULT_ROLE_PREFIX, SecurityPolicyTranslator
from ocp_translate.translate.secrets import DEFAULT_SECRET_PREFIX
from ocp_translate.translate.subjects import (
    DEFAULT_EXCLUSION_PATTERN,
    DEFAULT_SERVICE_ACCOUNT_PATTERN,
    SERVICE_ACCOUNT_SEGMENTS,
)

logger = logging.getLogger(__name__)

SCHEMA_FILE = Path(__file__).parent / "schema" / "config.schema.json"
DEFAULT_CONFIG_FILE = "ocp-translate.yaml"

Log = logging.Logger | logging.LoggerAdapter | None


@dataclass
class TranslatorConfig:
    """Settings shared by all translators."""

    name: str = DEFAULT_NAME
    domain: str = ""
    user_exclusion_pattern: str = DEFAULT_EXCLUSION_PATTERN
    service_account_pattern: str = DEFAULT_SERVICE_ACCOUNT_PATTERN
    service_account_segments: int = SERVICE_ACCOUNT_SEGMENTS
    role_prefix: str = DEFAULT_ROLE_PREFIX
    secret_prefix: str = DEFAULT_SECRET_PREFIX
    run_as_user_overrides: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "TranslatorConfig":
        """
        Build a configuration from a decoded config document.

        Raises:
            InvalidConfigError: The document does not match the schema or
                contains an invalid regular expression
        """
        data = data or {}
        schema = json.loads(SCHEMA_FILE.read_text())
        try:
            validate(instance=data, schema=schema)
        except ValidationError as e:
            path = ".".join(str(p) for p in e.path) if e.path else "root"
            raise InvalidConfigError(f"at '{path}': {e.message}") from e

        known = {f.name for f in fields(cls)}
        config = cls(**{k: v for k, v in data.items() if k in known})
        for key in ("user_exclusion_pattern", "service_account_pattern"):
            try:
                re.compile(getattr(config, key))
            except re.error as e:
                raise InvalidConfigError(f"'{key}' is not a valid regular expression: {e}") from e
        return config

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def route_translator(self, log: Log = None) -> RouteTranslator:
        return RouteTranslator(
            self.name, log, domain=self.domain, secret_prefix=self.secret_prefix
        )

    def security_policy_translator(self, log: Log = None) -> SecurityPolicyTranslator:
        return SecurityPolicyTranslator(
            self.name,
            log,
            role_prefix=self.role_prefix,
            user_exclusion_pattern=self.user_exclusion_pattern,
            service_account_pattern=self.service_account_pattern,
            service_account_segments=self.service_account_segments,
            run_as_user_overrides=self.run_as_user_overrides,
        )

    def deployment_config_translator(self, log: Log = None) -> DeploymentConfigTranslator:
        return DeploymentConfigTranslator(self.name, log)

    def ingress_translator(self, log: Log = None) -> IngressTranslator:
        return IngressTranslator(self.name, log, domain=self.domain)


def load_config(path: str | Path | None = None) -> TranslatorConfig:
    """
    Load translator configuration from a YAML file.

    Args:
        path: Config file; None looks for ocp-translate.yaml in the current
            directory and falls back to defaults when it is absent

    Returns:
        TranslatorConfig

    Raises:
        InvalidConfigError: The file is missing (when given explicitly),
            unparseable, or invalid
    """
    if path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_FILE
        if not candidate.exists():
            logger.debug("No configuration file found, using defaults")
            return TranslatorConfig()
        path = candidate

    config_file = Path(path)
    if not config_file.is_file():
        raise InvalidConfigError(f"{config_file} does not exist")

    try:
        data = yaml.safe_load(config_file.read_text())
    except yaml.YAMLError as e:
        raise InvalidConfigError(f"{config_file} is not valid YAML: {e}") from e

    if data is not None and not isinstance(data, dict):
        raise InvalidConfigError(f"{config_file} must contain a mapping")

    logger.debug(f"Loaded configuration from {config_file}")
    return TranslatorConfig.from_dict(data)
