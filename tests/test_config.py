"""Tests for configuration loading and error types."""

from pathlib import Path

import pytest

from wsdl_automation.config import DEFAULT_NAMESPACES, GeneratorConfig, ParseOptions
from wsdl_automation.errors import (
    ConfigError,
    DirectiveError,
    ErrorCategory,
    NoTypesError,
    WsdlError,
)


# =============================================================================
# ParseOptions Tests
# =============================================================================

class TestParseOptions:
    """Tests for directive interpretation switches."""

    def test_defaults(self):
        """Defaults match the directive grammar."""
        options = ParseOptions()

        assert options.disable_array_suffix is False
        assert options.global_default is False
        assert options.return_name("Add") == "return"

    def test_return_name_placeholder(self):
        """%method% is replaced by the operation name."""
        assert ParseOptions(return_name_template="%method%Result").return_name("Add") == "AddResult"

    def test_unknown_option(self):
        """Unknown keys are rejected."""
        with pytest.raises(ConfigError, match="suffix"):
            ParseOptions.from_dict({"suffix": True})


# =============================================================================
# GeneratorConfig Tests
# =============================================================================

class TestGeneratorConfig:
    """Tests for GeneratorConfig class."""

    def test_defaults(self):
        """Compact mode with the standard prefix table."""
        config = GeneratorConfig()

        assert config.optimize is True
        assert config.include_desc is False
        assert config.namespaces == DEFAULT_NAMESPACES
        assert config.namespaces is not DEFAULT_NAMESPACES
        assert (config.tns_prefix, config.xsd_prefix) == ("tns", "s")

    def test_compact_mode_disables_descriptions(self):
        """Descriptions are only kept for readable output."""
        assert GeneratorConfig(include_desc=True).include_desc is False
        assert GeneratorConfig(include_desc=True, optimize=False).include_desc is True

    def test_source_files_become_paths(self):
        """String paths are converted."""
        config = GeneratorConfig(source_files=["a.php", Path("b.php")])

        assert config.source_files == [Path("a.php"), Path("b.php")]

    def test_parse_from_dict(self):
        """A nested mapping becomes ParseOptions."""
        config = GeneratorConfig(parse={"disable_array_suffix": True})

        assert config.parse == ParseOptions(disable_array_suffix=True)

    def test_validate(self):
        """Namespace and endpoint are required."""
        with pytest.raises(ConfigError):
            GeneratorConfig(endpoint="http://x").validate()
        with pytest.raises(ConfigError):
            GeneratorConfig(namespace="urn:x").validate()
        GeneratorConfig(namespace="urn:x", endpoint="http://x").validate()

    def test_with_overrides_ignores_none(self):
        """None leaves a setting unchanged."""
        config = GeneratorConfig(namespace="urn:x", service_name="A")

        updated = config.with_overrides(namespace=None, service_name="B", optimize=False)

        assert updated.namespace == "urn:x"
        assert updated.service_name == "B"
        assert updated.optimize is False
        assert config.service_name == "A"

    def test_from_dict_rejects_unknown_keys(self):
        """Typos in configuration keys are reported."""
        with pytest.raises(ConfigError, match="namepsace"):
            GeneratorConfig.from_dict({"namepsace": "urn:x"})

    def test_to_dict(self):
        """Serializable settings round out to plain values."""
        data = GeneratorConfig(namespace="urn:x", source_files=["a.php"]).to_dict()

        assert data["namespace"] == "urn:x"
        assert data["source_files"] == ["a.php"]
        assert data["parse"]["return_name_template"] == "return"


class TestConfigFromYaml:
    """Tests for YAML loading."""

    def test_load(self, tmp_path):
        """Settings and nested parse options load from YAML."""
        path = tmp_path / "wsdl.yml"
        path.write_text(
            "namespace: urn:demo\n"
            "endpoint: http://localhost/soap\n"
            "optimize: false\n"
            "include_desc: true\n"
            "source_files:\n"
            "  - src/Demo.php\n"
            "parse:\n"
            "  return_name_template: '%method%Result'\n",
            encoding="utf-8",
        )

        config = GeneratorConfig.from_yaml(path)

        assert config.namespace == "urn:demo"
        assert config.include_desc is True
        assert config.source_files == [tmp_path / "src" / "Demo.php"]
        assert config.parse.return_name("Add") == "AddResult"

    def test_empty_file(self, tmp_path):
        """An empty file gives the defaults."""
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")

        assert GeneratorConfig.from_yaml(path).optimize is True

    def test_missing_file(self, tmp_path):
        """An unreadable file is a configuration error."""
        with pytest.raises(ConfigError):
            GeneratorConfig.from_yaml(tmp_path / "missing.yml")

    def test_invalid_yaml(self, tmp_path):
        """Syntax errors are reported as configuration errors."""
        path = tmp_path / "bad.yml"
        path.write_text("namespace: [unclosed\n", encoding="utf-8")

        with pytest.raises(ConfigError) as excinfo:
            GeneratorConfig.from_yaml(path)

        assert excinfo.value.category is ErrorCategory.CONFIG
        assert excinfo.value.cause is not None

    def test_root_must_be_mapping(self, tmp_path):
        """A list at the root is rejected."""
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError, match="mapping"):
            GeneratorConfig.from_yaml(path)


# =============================================================================
# Error Hierarchy Tests
# =============================================================================

class TestErrors:
    """Tests for the error types."""

    def test_to_dict(self):
        """Errors serialize type, message, category and context."""
        error = NoTypesError().with_context(sources=["a.php"])

        assert error.to_dict() == {
            "error_type": "NoTypesError",
            "message": "No complex types are available",
            "category": "VALIDATION",
            "context": {"sources": ["a.php"]},
        }

    def test_directive_error(self):
        """Directive errors carry keyword and argument."""
        error = DirectiveError("param", "Invalid param definition", argument="int")

        assert isinstance(error, WsdlError)
        assert error.category is ErrorCategory.PARSE
        assert error.context == {"keyword": "param", "argument": "int"}

    def test_cause_is_chained(self):
        """A cause is kept and chained."""
        cause = OSError("disk")
        error = ConfigError("cannot read", cause=cause)

        assert error.__cause__ is cause
        assert error.to_dict()["cause"] == "disk"
