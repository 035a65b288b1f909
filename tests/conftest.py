"""Pytest configuration and shared fixtures."""

import pytest
import structlog
from pathlib import Path

from wsdl_automation.config import GeneratorConfig


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop any logging configuration a test installed."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture(scope="session")
def fixtures_path():
    """Path to test fixtures."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def demo_source_path(fixtures_path):
    """Path to the annotated demo service."""
    return fixtures_path / "demo_service.php"


@pytest.fixture(scope="session")
def demo_source(demo_source_path):
    """Text of the annotated demo service."""
    return demo_source_path.read_text(encoding="utf-8")


@pytest.fixture
def demo_config(demo_source_path):
    """Compact-mode configuration for the demo service."""
    return GeneratorConfig(
        namespace="urn:demo",
        endpoint="http://localhost/soap",
        source_files=[demo_source_path],
    )


def _php_block(*lines: str, function: str | None = None) -> str:
    body = "\n".join(f" * {line}" for line in lines)
    text = f"/**\n{body}\n */\n"
    if function:
        text += f"public function {function}() {{}}\n"
    return text


@pytest.fixture
def php_block():
    """Builder for one documentation comment, optionally followed by a function."""
    return _php_block
