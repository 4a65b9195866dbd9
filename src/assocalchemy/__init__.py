# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
AssocAlchemy: association registration and integrity for pydantic-based models.

Declare relationships between models (belongs_to, has_one, has_many,
belongs_to_many), get synthesized foreign key metadata and generated accessors,
and have conflicting declarations rejected at definition time.
"""

from .associations import Association, AssociationName
from .belongs_to import BelongsTo
from .belongs_to_many import BelongsToMany
from .config import RegistryConfig
from .constants import AssociationType, CascadeAction, DataType, HookEvent
from .errors import (
    AssocAlchemyError,
    AssociationError,
    InvalidTargetError,
    ModelNotDefinedError,
    NamingCollisionError,
)
from .has_many import HasMany
from .has_one import HasOne
from .helpers import (
    add_foreign_key_constraints,
    assert_association_model_is_defined,
    assert_association_unique,
    check_naming_collision,
    define_association,
    get_model,
    mixin_methods,
    remove_undefined,
)
from .hooks import HookCollection
from .options import AssociationOptions
from .orm import (
    AccessorEntry,
    FieldMetadata,
    ForeignKeyReference,
    ModelRegistry,
    ORMModel,
    ThroughTable,
    is_model_class,
    model_field,
)

__version__ = "0.1.0"

__all__ = [
    # Models and registry
    "ORMModel",
    "ModelRegistry",
    "RegistryConfig",
    "model_field",
    "is_model_class",
    "FieldMetadata",
    "ForeignKeyReference",
    "ThroughTable",
    "AccessorEntry",
    "HookCollection",
    # Associations
    "Association",
    "AssociationName",
    "AssociationOptions",
    "BelongsTo",
    "HasOne",
    "HasMany",
    "BelongsToMany",
    # Shared scaffolding
    "check_naming_collision",
    "assert_association_unique",
    "assert_association_model_is_defined",
    "add_foreign_key_constraints",
    "mixin_methods",
    "get_model",
    "remove_undefined",
    "define_association",
    # Enums
    "AssociationType",
    "CascadeAction",
    "DataType",
    "HookEvent",
    # Errors
    "AssocAlchemyError",
    "AssociationError",
    "InvalidTargetError",
    "ModelNotDefinedError",
    "NamingCollisionError",
]
