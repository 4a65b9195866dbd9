# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and shared fixtures for AssocAlchemy tests.
"""

from __future__ import annotations

from typing import Tuple, Type

import pytest

from assocalchemy import ModelRegistry, ORMModel, model_field


@pytest.fixture(scope="function")
def registry() -> ModelRegistry:
    """Fresh registry per test; model classes never leak between tests."""
    return ModelRegistry()


@pytest.fixture(scope="function")
def user_model(registry: ModelRegistry) -> Type[ORMModel]:
    @registry.register()
    class User(ORMModel):
        """Test user model."""
        id: int = model_field(primary_key=True)
        name: str = model_field(default="")

    return User


@pytest.fixture(scope="function")
def post_model(registry: ModelRegistry) -> Type[ORMModel]:
    @registry.register()
    class Post(ORMModel):
        """Test post model."""
        id: int = model_field(primary_key=True)
        title: str = model_field(default="")

    return Post


@pytest.fixture(scope="function")
def group_model(registry: ModelRegistry) -> Type[ORMModel]:
    @registry.register()
    class Group(ORMModel):
        """Test group model."""
        id: int = model_field(primary_key=True)
        name: str = model_field(default="")

    return Group


@pytest.fixture(scope="function")
def user_post(user_model: Type[ORMModel], post_model: Type[ORMModel]) -> Tuple[Type[ORMModel], Type[ORMModel]]:
    return user_model, post_model
