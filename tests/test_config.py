"""
Tests for translator configuration.
"""

import pytest
import yaml

from ocp_translate.config import TranslatorConfig, load_config
from ocp_translate.exceptions import InvalidConfigError
from ocp_translate.translate.route import RouteTranslator
from ocp_translate.translate.scc import DEFAULT_ROLE_PREFIX


class TestTranslatorConfig:
    """Tests for building configuration from a document."""

    def test_defaults(self):
        config = TranslatorConfig.from_dict(None)

        assert config.name == "ocp-translate"
        assert config.domain == ""
        assert config.role_prefix == DEFAULT_ROLE_PREFIX
        assert config.secret_prefix == "hpsecret-"
        assert config.run_as_user_overrides == {}

    def test_values(self):
        config = TranslatorConfig.from_dict(
            {
                "name": "migrator",
                "domain": "*.k8s.example.com",
                "role_prefix": "psp-",
                "run_as_user_overrides": {"MustRunAsRange": "MustRunAs"},
            }
        )

        assert config.name == "migrator"
        assert config.to_dict()["run_as_user_overrides"] == {"MustRunAsRange": "MustRunAs"}

    def test_unknown_key_rejected(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            TranslatorConfig.from_dict({"nmae": "typo"})

        assert "root" in exc_info.value.message

    def test_bad_override_value_rejected(self):
        with pytest.raises(InvalidConfigError, match="run_as_user_overrides.MustRunAsRange"):
            TranslatorConfig.from_dict({"run_as_user_overrides": {"MustRunAsRange": "Root"}})

    def test_empty_name_rejected(self):
        with pytest.raises(InvalidConfigError):
            TranslatorConfig.from_dict({"name": ""})

    @pytest.mark.parametrize("name", ["My Tool", "Migrator", "-migrator", "tool_name"])
    def test_name_must_be_dns_subdomain(self, name):
        with pytest.raises(InvalidConfigError, match="at 'name'"):
            TranslatorConfig.from_dict({"name": name})

    def test_dotted_name_accepted(self):
        config = TranslatorConfig.from_dict({"name": "migrate.example.com"})
        assert config.name == "migrate.example.com"

    def test_service_account_segments(self):
        config = TranslatorConfig.from_dict({"service_account_segments": 3})
        assert config.service_account_segments == 3

        with pytest.raises(InvalidConfigError, match="service_account_segments"):
            TranslatorConfig.from_dict({"service_account_segments": 1})

    def test_bad_regex_rejected(self):
        with pytest.raises(InvalidConfigError, match="not a valid regular expression"):
            TranslatorConfig.from_dict({"user_exclusion_pattern": "(unclosed"})


class TestTranslatorFactories:
    """Tests that configuration reaches the translators."""

    def test_route_translator(self):
        config = TranslatorConfig(name="migrator", domain="apps.x", secret_prefix="tls-")

        translator = config.route_translator()

        assert isinstance(translator, RouteTranslator)
        assert translator.name == "migrator"
        assert translator.domain == "apps.x"
        assert translator.secret_prefix == "tls-"

    def test_security_policy_translator(self):
        config = TranslatorConfig(
            role_prefix="psp-",
            user_exclusion_pattern="^root$",
            service_account_pattern="^sa:",
            service_account_segments=3,
            run_as_user_overrides={"MustRunAsRange": "MustRunAs"},
        )

        translator = config.security_policy_translator()

        assert translator.role_prefix == "psp-"
        assert translator.classifier.is_excluded("root")
        assert not translator.classifier.is_excluded("openshift")
        assert translator.run_as_user_table.remap("MustRunAsRange").value == "MustRunAs"
        assert translator.classifier.service_account_segments == 3

    def test_ingress_and_dc_translators(self):
        config = TranslatorConfig(name="migrator", domain="apps.x")
        assert config.ingress_translator().domain == "apps.x"
        assert config.deployment_config_translator().name == "migrator"


class TestLoadConfig:
    """Tests for reading configuration files."""

    def test_no_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_config() == TranslatorConfig()

    def test_default_file_in_cwd(self, tmp_path, monkeypatch):
        (tmp_path / "ocp-translate.yaml").write_text(yaml.safe_dump({"name": "migrator"}))
        monkeypatch.chdir(tmp_path)

        assert load_config().name == "migrator"

    def test_explicit_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text("domain: '*.apps.example.com'\n")

        assert load_config(path).domain == "*.apps.example.com"

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == TranslatorConfig()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(InvalidConfigError, match="does not exist"):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("name: [unclosed")

        with pytest.raises(InvalidConfigError, match="not valid YAML"):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(InvalidConfigError, match="must contain a mapping"):
            load_config(path)
