"""
Translate an OpenShift DeploymentConfig into an apps/v1 Deployment.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any

from ocp_translate.models.openshift import DeploymentConfig
from ocp_translate.translate.annotations import FieldFact, always
from ocp_translate.translate.base import DEFAULT_NAME, BaseTranslator
from ocp_translate.translate.enums import (
    DEPLOYMENT_STRATEGY,
    ROLLING_UPDATE,
    EnumTable,
    RemapOutcome,
)

logger = logging.getLogger(__name__)

DEPLOYMENT_API_VERSION = "apps/v1"
DEPLOYMENT_KIND = "Deployment"

ROLLING_UPDATE_PARAMS = ("maxSurge", "maxUnavailable")


def _rolling_param(key: str):
    return lambda dc: (dc.strategy.rolling_params or {}).get(key) is not None


DEPLOYMENT_CONFIG_FIELD_FACTS = (
    FieldFact("Spec.test", lambda dc: dc.test),
    FieldFact("Spec.triggers", always),
    FieldFact(
        "Spec.Strategy.activeDeadlineSeconds",
        lambda dc: dc.strategy.active_deadline_seconds is not None,
    ),
    FieldFact("Spec.Strategy.rollingParams.intervalSeconds", _rolling_param("intervalSeconds")),
    FieldFact("Spec.Strategy.rollingParams.timeoutSeconds", _rolling_param("timeoutSeconds")),
    FieldFact(
        "Spec.Strategy.rollingParams.updatePeriodSeconds", _rolling_param("updatePeriodSeconds")
    ),
)


@dataclass
class DeploymentTranslation:
    deployment: dict[str, Any]

    def resources(self) -> list[dict[str, Any]]:
        return [self.deployment]


class DeploymentConfigTranslator(BaseTranslator):
    """
    Copies a DeploymentConfig into a Deployment.

    The pod template, selector and replica settings are copied as they are.
    The strategy type is remapped; rolling parameters are only carried over
    for rolling updates that did not come from a Custom strategy.
    """

    source_kind = DeploymentConfig.KIND

    def __init__(
        self,
        name: str = DEFAULT_NAME,
        log: logging.Logger | logging.LoggerAdapter | None = None,
        facts=None,
        strategy_table: EnumTable = DEPLOYMENT_STRATEGY,
    ):
        super().__init__(name, log, facts)
        self.strategy_table = strategy_table

    @classmethod
    def default_facts(cls) -> tuple[FieldFact, ...]:
        return DEPLOYMENT_CONFIG_FIELD_FACTS

    def translate(self, dc: DeploymentConfig) -> DeploymentTranslation:
        self.log.debug(f"[{self.name}] Translating DeploymentConfig {dc.namespace}/{dc.name}")
        spec: dict[str, Any] = {}

        if dc.replicas is not None:
            spec["replicas"] = dc.replicas
        if dc.revision_history_limit is not None:
            spec["revisionHistoryLimit"] = dc.revision_history_limit
        if dc.paused:
            spec["paused"] = True
        if dc.min_ready_seconds is not None:
            spec["minReadySeconds"] = dc.min_ready_seconds
        if dc.selector is not None:
            spec["selector"] = {"matchLabels": dict(dc.selector)}

        strategy = self.build_strategy(dc)
        if strategy:
            spec["strategy"] = strategy

        if dc.template is not None:
            spec["template"] = copy.deepcopy(dc.template)

        deployment = {
            "apiVersion": DEPLOYMENT_API_VERSION,
            "kind": DEPLOYMENT_KIND,
            "metadata": self.build_metadata(dc.metadata, annotations=self.recorder.annotate(dc)),
            "spec": spec,
        }
        self.log.debug(f"[{self.name}] Translated Deployment {deployment['metadata']}")
        return DeploymentTranslation(deployment=deployment)

    def build_strategy(self, dc: DeploymentConfig) -> dict[str, Any]:
        """
        Build ``Deployment.spec.strategy``.

        Returns:
            Strategy dict, empty when the DeploymentConfig sets no strategy type
        """
        source_type = dc.strategy.type
        self.log.debug(f"[{self.name}] Strategy: {dc.strategy}")
        remapped = self.strategy_table.remap(source_type)
        if remapped.value is None:
            return {}
        if remapped.outcome is RemapOutcome.UNMAPPED:
            self.log.warning(
                f"[{self.name}] Strategy type {source_type!r} has no Deployment counterpart, "
                "copied as is"
            )

        strategy: dict[str, Any] = {"type": remapped.value}
        if remapped.value == ROLLING_UPDATE and source_type != "Custom":
            params = dc.strategy.rolling_params or {}
            rolling_update = {
                key: copy.deepcopy(params[key])
                for key in ROLLING_UPDATE_PARAMS
                if params.get(key) is not None
            }
            if rolling_update:
                strategy["rollingUpdate"] = rolling_update
        return strategy
