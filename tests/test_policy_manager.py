"""Tests for the YAML policy file manager."""

import pytest

from sla_engine.core import ConfigurationException
from sla_engine.compliance.infrastructure import PolicyConfigManager

POLICY_YAML = """
policies:
  - sector_id: billing
    sector_name: Billing
    p0_hours: 2
    p1_hours: 8
    p3_hours: 120
  - sector_id: infra
    p1_hours: 4
"""


@pytest.fixture
def policy_file(tmp_path):
    path = tmp_path / "sla_policies.yaml"
    path.write_text(POLICY_YAML, encoding="utf-8")
    return path


class TestPolicyConfigManager:
    def test_load(self, policy_file):
        manager = PolicyConfigManager()
        config = manager.load(policy_file)

        assert [p.sector_id for p in config.policies] == ["billing", "infra"]
        assert manager.config.get_policy("billing").p1_hours == 8
        assert len(manager.get_policies()) == 2

    def test_missing_file_means_no_policies(self, tmp_path):
        manager = PolicyConfigManager()
        manager.load(tmp_path / "absent.yaml")
        assert manager.get_policies() == []

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        manager = PolicyConfigManager()
        assert manager.load(path).policies == []

    @pytest.mark.parametrize("content", [
        "policies: [unclosed",
        "- just\n- a list\n",
        "policies:\n  - sector_id: x\n    p1_hours: -3\n",
    ])
    def test_invalid_file_raises(self, tmp_path, content):
        path = tmp_path / "bad.yaml"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigurationException):
            PolicyConfigManager().load(path)

    def test_reload_picks_up_changes(self, policy_file):
        manager = PolicyConfigManager()
        manager.load(policy_file)
        policy_file.write_text("policies:\n  - sector_id: billing\n    p1_hours: 12\n", encoding="utf-8")

        assert manager.reload() is True
        assert manager.config.get_policy("billing").p1_hours == 12
        assert manager.config.get_policy("infra") is None

    def test_failed_reload_keeps_previous_policies(self, policy_file):
        manager = PolicyConfigManager()
        manager.load(policy_file)
        policy_file.write_text("policies: [broken", encoding="utf-8")

        assert manager.reload() is False
        assert manager.config.get_policy("billing").p1_hours == 8

    def test_reload_before_load(self):
        assert PolicyConfigManager().reload() is False

    def test_config_before_load(self):
        with pytest.raises(RuntimeError):
            PolicyConfigManager().config

    def test_start_watching_requires_load(self):
        with pytest.raises(RuntimeError):
            PolicyConfigManager().start_watching()

    def test_watch_lifecycle(self, policy_file):
        manager = PolicyConfigManager()
        manager.load(policy_file)
        manager.start_watching()
        try:
            assert manager.is_watching
        finally:
            manager.stop_watching()
        assert not manager.is_watching
        # Safe to call twice
        manager.stop_watching()
