"""Tests for resource data and schema defaults."""

import pytest

from terraform_provider_ovh.domain.exceptions import ConfigurationError
from terraform_provider_ovh.domain.resource_data import ResourceData
from terraform_provider_ovh.domain.schema import FieldType, SchemaField, env_default

SCHEMA = {
    "name": SchemaField(type=FieldType.STRING, required=True),
    "size": SchemaField(type=FieldType.INT, optional=True, default=3),
    "enabled": SchemaField(type=FieldType.BOOL, optional=True),
    "tags": SchemaField(type=FieldType.LIST, optional=True),
    "region": SchemaField(type=FieldType.STRING, optional=True,
                          default_func=env_default("TEST_REGION", "GRA1")),
    "status": SchemaField(type=FieldType.STRING, computed=True),
}


class TestEnvDefault:
    """Test environment default functions."""

    def test_fallback_when_unset(self, monkeypatch):
        monkeypatch.delenv("TEST_REGION", raising=False)
        assert env_default("TEST_REGION", "GRA1")() == "GRA1"

    def test_environment_value(self, monkeypatch):
        monkeypatch.setenv("TEST_REGION", "SBG1")
        assert env_default("TEST_REGION", "GRA1")() == "SBG1"

    def test_function_is_named_after_variable(self):
        assert env_default("OVH_ENDPOINT").__name__ == "env_default_ovh_endpoint"


class TestSchemaField:
    """Test schema field descriptions."""

    def test_describe_lists_flags(self):
        field = SchemaField(type=FieldType.STRING, required=True, force_new=True, sensitive=True)
        description = field.describe()

        assert description["type"] == "string"
        assert description["required"] is True
        assert description["force_new"] is True
        assert description["sensitive"] is True
        assert "default" not in description

    def test_default_func_wins(self, monkeypatch):
        monkeypatch.setenv("TEST_REGION", "BHS1")
        field = SchemaField(type=FieldType.STRING, default="GRA1",
                            default_func=env_default("TEST_REGION"))
        assert field.resolve_default() == "BHS1"

    @pytest.mark.parametrize("field_type,zero", [
        (FieldType.STRING, ""),
        (FieldType.INT, 0),
        (FieldType.BOOL, False),
        (FieldType.FLOAT, 0.0),
        (FieldType.LIST, []),
        (FieldType.MAP, {}),
    ])
    def test_zero_values(self, field_type, zero):
        assert field_type.zero_value() == zero


class TestResourceData:
    """Test ResourceData behaviour."""

    def test_from_config_applies_defaults(self, monkeypatch):
        """Test static and environment defaults are applied."""
        monkeypatch.delenv("TEST_REGION", raising=False)
        data = ResourceData.from_config(SCHEMA, {"name": "net"})

        assert data.get("size") == 3
        assert data.get("region") == "GRA1"

    def test_explicit_value_beats_default(self):
        data = ResourceData.from_config(SCHEMA, {"name": "net", "size": 7})
        assert data.get("size") == 7

    def test_missing_required_field(self):
        """Test required fields are enforced."""
        with pytest.raises(ConfigurationError) as exc_info:
            ResourceData.from_config(SCHEMA, {})
        assert exc_info.value.missing_fields == ["name"]

    def test_required_field_from_state(self):
        """Test a required field already in state is accepted."""
        data = ResourceData.from_config(SCHEMA, {}, state={"name": "net"}, resource_id="1")
        assert data.get("name") == "net"

    def test_unknown_argument(self):
        with pytest.raises(ConfigurationError, match="Unsupported argument"):
            ResourceData.from_config(SCHEMA, {"name": "net", "colour": "blue"})

    def test_get_returns_zero_value_when_unset(self):
        data = ResourceData(SCHEMA)
        assert data.get("enabled") is False
        assert data.get("tags") == []

    def test_get_ok(self):
        """Test get_ok reports zero values as unset."""
        data = ResourceData(SCHEMA, config={"name": "net", "enabled": False})

        assert data.get_ok("name") == ("net", True)
        assert data.get_ok("enabled") == (False, False)
        assert data.is_set("enabled") is True
        assert data.is_set("tags") is False

    def test_set_unknown_field(self):
        with pytest.raises(KeyError):
            ResourceData(SCHEMA).set("colour", "blue")

    def test_has_change(self):
        """Test changes are computed against the prior state."""
        data = ResourceData(SCHEMA, config={"name": "new"}, state={"name": "old", "size": 3})

        assert data.has_change("name") is True
        assert data.has_change("size") is False

    def test_state_includes_id(self):
        data = ResourceData(SCHEMA, config={"name": "net"})
        data.set_id(42)
        data.set("status", "ACTIVE")

        assert data.state() == {"name": "net", "status": "ACTIVE", "id": "42"}

    def test_clearing_id(self):
        data = ResourceData(SCHEMA, resource_id="abc")
        data.set_id("")
        assert data.id == ""

    def test_config_is_copied(self):
        """Test the caller's mapping is never mutated."""
        tags = ["a"]
        data = ResourceData(SCHEMA, config={"name": "net", "tags": tags})
        data.get("tags").append("b")
        assert tags == ["a"]
