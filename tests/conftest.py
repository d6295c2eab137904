"""
Shared pytest fixtures for the gotojs test suite.

This module provides:
- Preprocessors with a fixed placeholder so shielded text is predictable
- Isolation of the cached settings and the package logger between tests
- A helper for asserting Pydantic validation failures
"""

import logging

import pytest
from typing import Any, Type
from pydantic import BaseModel, ValidationError

from gotojs.core.config import get_settings
from gotojs.translator import GotoPreprocessor, LiteralShield


PLACEHOLDER = "_P1234567890"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Run every test with fresh settings and an untouched ``gotojs`` logger."""
    for key in ("CONTENT_TYPE", "OUTPUT_CONTENT_TYPE", "SCANNER", "STRICT",
                "ENCODING", "LOG_LEVEL", "LOG_FORMAT", "LOG_FILE"):
        monkeypatch.delenv(f"GOTOJS_{key}", raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()

    package_logger = logging.getLogger("gotojs")
    saved = (list(package_logger.handlers), package_logger.level, package_logger.propagate)
    yield
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        if handler not in saved[0]:
            handler.close()
    package_logger.handlers[:] = saved[0]
    package_logger.setLevel(saved[1])
    package_logger.propagate = saved[2]
    get_settings.cache_clear()


@pytest.fixture
def placeholder() -> str:
    return PLACEHOLDER


@pytest.fixture
def shield() -> LiteralShield:
    """Literal shield with a fixed placeholder token."""
    return LiteralShield(placeholder=PLACEHOLDER)


@pytest.fixture
def preprocessor() -> GotoPreprocessor:
    """Preprocessor with a fixed placeholder token."""
    return GotoPreprocessor(placeholder=PLACEHOLDER)


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised with expected details."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        """
        Assert that creating a model raises ValidationError.

        Args:
            model_class: The Pydantic model class
            data: Invalid data to pass to model
            expected_field: Expected field name in error (optional)

        Returns:
            The ValidationError that was raised
        """
        with pytest.raises(ValidationError) as exc_info:
            model_class(**data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e['loc'][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation
