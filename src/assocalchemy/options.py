# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Per-call association options.
"""

from __future__ import annotations

import copy
import warnings
from typing import TYPE_CHECKING, Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .constants import CascadeAction, DeprecationMessages

if TYPE_CHECKING:
    from .orm import ModelRegistry


class AssociationOptions(BaseModel):
    """
    Configuration bag for a single association declaration.

    Unknown keys are kept as extras so kind-specific constructors and hooks can
    carry their own settings through the pipeline.

    :class: AssociationOptions
    :synopsis: Validated, copyable association declaration options
    """

    model_config = ConfigDict(extra="allow", validate_assignment=True, use_enum_values=False)

    alias: Optional[str] = Field(default=None, description="Name of the association on the source model")
    foreign_key: Optional[str] = Field(default=None, description="Name of the foreign key attribute")
    other_key: Optional[str] = Field(default=None, description="Target-side key name in a through table")
    source_key: Optional[str] = Field(default=None, description="Source attribute the foreign key points to")
    target_key: Optional[str] = Field(default=None, description="Target attribute the foreign key points to")
    through: Optional[str] = Field(default=None, description="Through table name for many-to-many")
    inverse_alias: Optional[str] = Field(default=None, description="Alias of the paired association")
    foreign_key_constraint: bool = Field(default=False, description="Generate a referential constraint")
    on_delete: Optional[CascadeAction] = None
    on_update: Optional[CascadeAction] = None
    hooks: Optional[bool] = Field(default=None, description="Run before/after associate hooks")

    _registry: Any = PrivateAttr(default=None)
    _warn_on_registry: bool = PrivateAttr(default=True)

    @property
    def registry(self) -> Optional["ModelRegistry"]:
        """Deprecated: the registry owning the source model."""
        if self._warn_on_registry:
            warnings.warn(DeprecationMessages.OPTIONS_REGISTRY, DeprecationWarning, stacklevel=2)
        return self._registry

    def attach_registry(self, registry: "ModelRegistry", warn: bool = True) -> None:
        self._registry = registry
        self._warn_on_registry = warn

    @classmethod
    def normalize(
        cls,
        options: Union["AssociationOptions", Mapping[str, Any], None] = None,
        **overrides: Any,
    ) -> "AssociationOptions":
        """
        Build a detached copy of the given options.

        Keyword overrides whose value is None are ignored, so declaration methods
        can forward their optional keyword arguments unconditionally.

        :param options: Options instance, mapping, or None
        :param overrides: Individual option values taking precedence over ``options``
        :returns: A new instance sharing no mutable state with the input
        :rtype: AssociationOptions
        """
        from .helpers import remove_undefined

        if options is None:
            data: dict = {}
        elif isinstance(options, AssociationOptions):
            data = options.model_dump()
        elif isinstance(options, Mapping):
            data = dict(options)
        else:
            raise TypeError(f"Association options must be a mapping or AssociationOptions, got {type(options).__name__}")

        data.update(remove_undefined(overrides))
        return cls.model_validate(copy.deepcopy(data))
