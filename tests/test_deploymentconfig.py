"""
Tests for DeploymentConfig to Deployment translation.
"""

import logging

import pytest

from ocp_translate.exceptions import SourceFormatError
from ocp_translate.models.openshift import DeploymentConfig
from ocp_translate.translate.deploymentconfig import DeploymentConfigTranslator


def dc_from(load_fixture, **strategy_changes):
    doc = load_fixture("deploymentconfig.json")
    doc["spec"]["strategy"].update(strategy_changes)
    return DeploymentConfig.from_dict(doc)


class TestDeploymentConfigTranslation:
    """Tests for the Deployment produced from a DeploymentConfig."""

    def test_rolling_dc(self, deployment_config):
        deployment = DeploymentConfigTranslator("migrator").translate(deployment_config).deployment

        assert deployment["apiVersion"] == "apps/v1"
        assert deployment["kind"] == "Deployment"
        assert deployment["metadata"]["name"] == "frontend"
        assert deployment["metadata"]["namespace"] == "shop"
        assert deployment["spec"] == {
            "replicas": 3,
            "revisionHistoryLimit": 10,
            "selector": {"matchLabels": {"app": "frontend"}},
            "strategy": {
                "type": "RollingUpdate",
                "rollingUpdate": {"maxSurge": "25%", "maxUnavailable": 1},
            },
            "template": deployment_config.template,
        }

    def test_unsupported_fields_annotated(self, deployment_config):
        deployment = DeploymentConfigTranslator("migrator").translate(deployment_config).deployment

        assert deployment["metadata"]["annotations"] == {
            "migrator/DeploymentConfig.Spec.triggers": "unsupported",
            "migrator/DeploymentConfig.Spec.Strategy.activeDeadlineSeconds": "unsupported",
            "migrator/DeploymentConfig.Spec.Strategy.rollingParams.intervalSeconds": "unsupported",
            "migrator/DeploymentConfig.Spec.Strategy.rollingParams.timeoutSeconds": "unsupported",
        }

    def test_over_long_annotation_key_is_dropped(self, deployment_config, caplog, test_logger):
        """Test that updatePeriodSeconds cannot be recorded under a valid key."""
        translator = DeploymentConfigTranslator("migrator", log=test_logger)

        with caplog.at_level(logging.WARNING):
            deployment = translator.translate(deployment_config).deployment

        assert not any("updatePeriodSeconds" in k for k in deployment["metadata"]["annotations"])
        assert "updatePeriodSeconds is unsupported but" in caplog.text

    def test_template_is_copied(self, deployment_config):
        deployment = DeploymentConfigTranslator().translate(deployment_config).deployment

        deployment["spec"]["template"]["metadata"]["labels"]["app"] = "changed"

        assert deployment_config.template["metadata"]["labels"]["app"] == "frontend"

    def test_test_flag_annotated(self, load_fixture):
        doc = load_fixture("deploymentconfig.json")
        doc["spec"]["test"] = True

        deployment = (
            DeploymentConfigTranslator("migrator")
            .translate(DeploymentConfig.from_dict(doc))
            .deployment
        )

        assert deployment["metadata"]["annotations"]["migrator/DeploymentConfig.Spec.test"] == (
            "unsupported"
        )

    def test_paused_and_min_ready(self, load_fixture):
        doc = load_fixture("deploymentconfig.json")
        doc["spec"]["paused"] = True
        doc["spec"]["minReadySeconds"] = 5

        result = DeploymentConfigTranslator().translate(DeploymentConfig.from_dict(doc))
        spec = result.deployment["spec"]

        assert spec["paused"] is True
        assert spec["minReadySeconds"] == 5

    def test_deterministic(self, deployment_config):
        translator = DeploymentConfigTranslator("migrator")
        assert translator.translate(deployment_config) == translator.translate(deployment_config)


class TestStrategy:
    """Tests for strategy remapping."""

    def test_recreate(self, load_fixture):
        dc = dc_from(load_fixture, type="Recreate")
        assert DeploymentConfigTranslator().build_strategy(dc) == {"type": "Recreate"}

    def test_custom_maps_to_rolling_update_without_params(self, load_fixture):
        dc = dc_from(load_fixture, type="Custom")
        assert DeploymentConfigTranslator().build_strategy(dc) == {"type": "RollingUpdate"}

    def test_rolling_without_params(self, load_fixture):
        dc = dc_from(load_fixture, rollingParams=None)
        assert DeploymentConfigTranslator().build_strategy(dc) == {"type": "RollingUpdate"}

    def test_no_strategy_type(self, load_fixture):
        doc = load_fixture("deploymentconfig.json")
        del doc["spec"]["strategy"]

        deployment = DeploymentConfigTranslator().translate(DeploymentConfig.from_dict(doc))

        assert "strategy" not in deployment.deployment["spec"]

    def test_unknown_type_copied(self, load_fixture, caplog, test_logger):
        dc = dc_from(load_fixture, type="BlueGreen")

        with caplog.at_level(logging.WARNING):
            strategy = DeploymentConfigTranslator(log=test_logger).build_strategy(dc)

        assert strategy == {"type": "BlueGreen"}
        assert "has no Deployment counterpart" in caplog.text

    @pytest.mark.parametrize("bad", [True, 1.5])
    def test_invalid_max_surge_rejected(self, load_fixture, bad):
        with pytest.raises(SourceFormatError):
            dc_from(load_fixture, rollingParams={"maxSurge": bad})
