# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""Registry-wide configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RegistryConfig(BaseModel):
    """
    Settings shared by every model defined in a :class:`ModelRegistry`.

    :class: RegistryConfig
    :synopsis: Naming and warning behavior for a model registry
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    underscored: bool = Field(
        default=True,
        description="Build synthesized foreign key names in snake_case (user_id) instead of camelCase (userId)",
    )
    freeze_table_name: bool = Field(
        default=False,
        description="Use the model name as the table name instead of its plural form",
    )
    deprecation_warnings: bool = Field(
        default=True,
        description="Emit DeprecationWarning when deprecated option accessors are read",
    )
