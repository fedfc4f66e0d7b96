"""Tests configurations and fixtures."""

import os
from typing import TYPE_CHECKING

import pytest

from yamlcast.schemas import SCHEMAS

if TYPE_CHECKING:
    from collections.abc import Callable

if TYPE_CHECKING:
    from pytest_mock import MockerFixture, MockType

if TYPE_CHECKING:
    from yamlcast.schemas import Schema


@pytest.fixture(autouse=True)
def isolated_environment(mocker: 'MockerFixture') -> None:
    """Remove `YAMLCAST_` variables from the environment.

    Conversion defaults are read from the environment on every call,
    so variables set outside the test session must not leak into the
    expectations of individual tests.
    """
    mocker.patch.dict(os.environ, {
        key: value
        for key, value in os.environ.items()
        if not key.startswith('YAMLCAST_')
    }, clear=True)


@pytest.fixture
def patch_environment(mocker: 'MockerFixture') -> 'Callable[..., MockType]':
    """Provide a factory for setting `YAMLCAST_` variables.

    Returns a callable accepting setting names and values; each name is
    upper-cased and prefixed before being written to the environment.
    """
    def patch(**settings: str) -> 'MockType':
        """Patch the environment with conversion settings.

        Args:
            settings: Setting values keyed by setting name.

        Returns:
            The patcher produced by `mocker.patch.dict`.
        """
        return mocker.patch.dict(os.environ, {
            f'YAMLCAST_{name.upper()}': value
            for name, value in settings.items()
        })

    return patch


@pytest.fixture
def core() -> 'Schema':
    """Provide the shared YAML 1.2 Core schema instance."""
    return SCHEMAS['yaml12']


@pytest.fixture
def yaml11() -> 'Schema':
    """Provide the shared YAML 1.1 schema instance."""
    return SCHEMAS['yaml11']


@pytest.fixture
def json() -> 'Schema':
    """Provide the shared YAML 1.2 JSON schema instance."""
    return SCHEMAS['yaml12json']
