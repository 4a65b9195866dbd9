# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Constants module for AssocAlchemy.

This module centralizes all constants, configuration values, and literal strings
used throughout the AssocAlchemy codebase. No magic values are allowed elsewhere.

:module: constants
:synopsis: Centralized constants and configuration for AssocAlchemy
:author: AssocAlchemy Contributors
"""

from __future__ import annotations

from enum import Enum, StrEnum
from typing import Final


# ============================================================================
# CASCADE ACTIONS
# ============================================================================

class CascadeAction(Enum):
    """
    Foreign key cascade actions for referential integrity.

    :class: CascadeAction
    :synopsis: Enumeration of cascade actions for foreign key constraints
    """

    CASCADE = "CASCADE"      # Delete/update related records
    SET_NULL = "SET NULL"    # Set foreign key to NULL
    SET_DEFAULT = "SET DEFAULT"  # Set foreign key to default value
    RESTRICT = "RESTRICT"    # Prevent deletion/update if referenced
    NO_ACTION = "NO ACTION"  # Similar to RESTRICT but deferred


# ============================================================================
# ASSOCIATION KINDS
# ============================================================================

class AssociationType(StrEnum):
    """
    Closed set of relationship kinds.

    The value doubles as the name of the declaration method on the model
    class, which is what error messages show to the user.
    """

    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    BELONGS_TO_MANY = "belongs_to_many"


class DataType(StrEnum):
    """Column data types known to the metadata layer."""

    # @@ STEP 1: Integer types
    INT8 = "INT8"
    INT16 = "INT16"
    INT32 = "INT32"
    INT64 = "INT64"
    SERIAL = "SERIAL"

    # @@ STEP 2: Floating point and decimal types
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"

    # @@ STEP 3: Text, identity and temporal types
    STRING = "STRING"
    UUID = "UUID"
    BOOL = "BOOL"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"


# ============================================================================
# MODEL METADATA CONSTANTS
# ============================================================================

class ModelMetadataConstants:
    """Class-level attribute names used to store metadata on model classes."""

    # @@ STEP 1: Registration markers
    MODEL_NAME: Final[str] = "__orm_model_name__"
    TABLE_NAME: Final[str] = "__orm_table_name__"
    REGISTRY: Final[str] = "__orm_registry__"

    # @@ STEP 2: Per-class metadata stores
    ATTRIBUTES: Final[str] = "__orm_attributes__"
    ACCESSORS: Final[str] = "__orm_accessors__"
    HOOKS: Final[str] = "__orm_hooks__"
    ASSOCIATIONS: Final[str] = "associations"

    # @@ STEP 3: Field metadata key inside pydantic json_schema_extra
    FIELD_METADATA: Final[str] = "orm_metadata"


class AccessorConstants:
    """Logical accessor names and the prefixes used to build exposed method names."""

    # @@ STEP 1: Logical operation names
    GET: Final[str] = "get"
    SET: Final[str] = "set"
    CREATE: Final[str] = "create"
    ADD: Final[str] = "add"
    ADD_MULTIPLE: Final[str] = "add_multiple"
    REMOVE: Final[str] = "remove"
    REMOVE_MULTIPLE: Final[str] = "remove_multiple"
    HAS_SINGLE: Final[str] = "has_single"
    HAS_ALL: Final[str] = "has_all"
    COUNT: Final[str] = "count"

    # @@ STEP 2: Exposed-name prefixes
    GET_PREFIX: Final[str] = "get_"
    SET_PREFIX: Final[str] = "set_"
    CREATE_PREFIX: Final[str] = "create_"
    ADD_PREFIX: Final[str] = "add_"
    REMOVE_PREFIX: Final[str] = "remove_"
    HAS_PREFIX: Final[str] = "has_"
    COUNT_PREFIX: Final[str] = "count_"

    # @@ STEP 3: Origin tags stored in the capability table
    ORIGIN_USER: Final[str] = "user"
    ORIGIN_GENERATED: Final[str] = "generated"


# ============================================================================
# HOOK CONSTANTS
# ============================================================================

class HookEvent(StrEnum):
    """Lifecycle events a model can listen to."""

    BEFORE_ASSOCIATE = "before_associate"
    AFTER_ASSOCIATE = "after_associate"
    BEFORE_DEFINE = "before_define"
    AFTER_DEFINE = "after_define"


class HookPayloadConstants:
    """Keys of the payload mapping passed to association hooks."""

    SOURCE: Final[str] = "source"
    TARGET: Final[str] = "target"
    ASSOCIATION_CLASS: Final[str] = "association_class"
    ASSOCIATION: Final[str] = "association"
    REGISTRY: Final[str] = "registry"


# ============================================================================
# ERROR MESSAGE CONSTANTS
# ============================================================================

class ErrorCodes:
    """Machine-readable error codes carried by every AssocAlchemy exception."""

    NAMING_COLLISION: Final[str] = "NAMING_COLLISION"
    ASSOCIATION_CONFLICT: Final[str] = "ASSOCIATION_CONFLICT"
    INVALID_TARGET: Final[str] = "INVALID_TARGET"
    MODEL_NOT_DEFINED: Final[str] = "MODEL_NOT_DEFINED"


class ErrorMessages:
    """Error message constants."""

    # @@ STEP 1: Collision guard errors
    NAMING_COLLISION: Final[str] = (
        "Naming collision between attribute '{name}' and association '{name}' on model {model_name}. "
        "To remedy this, change the 'alias' option in your association definition"
    )
    DUPLICATE_ASSOCIATION: Final[str] = (
        "You have defined two associations with the same name \"{alias}\" on the model \"{model_name}\". "
        "Use another alias using the 'alias' parameter."
    )
    IMPLICIT_ASSOCIATION_EXISTS: Final[str] = (
        "You are trying to define the association \"{alias}\" on the model \"{model_name}\", "
        "but that association was already created by {root_source}.{root_type}({root_target})"
    )

    # @@ STEP 2: Pipeline precondition errors
    INVALID_TARGET: Final[str] = (
        "{source_name}.{method_name} called with something that's not a subclass of ORMModel: {target!r}"
    )
    MODEL_NOT_DEFINED: Final[str] = (
        "Model {model_name} must be defined (through ModelRegistry.define or ModelRegistry.register) "
        "before calling one of its association declaration methods."
    )

    # @@ STEP 3: Registry errors
    MODEL_NOT_REGISTERED: Final[str] = "Model {model_name} is not registered"
    NOT_A_MODEL: Final[str] = "Cannot define {value!r}: only ORMModel subclasses can be registered"

    # @@ STEP 4: Association construction errors
    DIRECT_INSTANTIATION: Final[str] = (
        "{class_name} cannot be instantiated directly, use the association declaration methods "
        "on the model class (belongs_to, has_one, has_many, belongs_to_many) instead"
    )
    UNRESOLVED_TARGET: Final[str] = "Model {model_name} is not defined in the registry yet"
    MISSING_PRIMARY_KEY: Final[str] = (
        "Model {model_name} has no primary key; {association_type} needs one to derive the join key"
    )
    MISSING_THROUGH: Final[str] = (
        "{source_name}.belongs_to_many({target_name}) requires a 'through' table name"
    )
    AMBIGUOUS_SELF_ASSOCIATION: Final[str] = (
        "{model_name}.belongs_to_many({model_name}) derives the same name '{name}' for both sides "
        "of the join. Pass distinct 'alias' and 'inverse_alias' (or 'other_key') options"
    )
    UNKNOWN_KEY_ATTRIBUTE: Final[str] = "Attribute '{key}' not found on model {model_name}"
    WRONG_TARGET_INSTANCE: Final[str] = (
        "Association '{alias}' expects instances of {expected}, got {actual}"
    )

    # @@ STEP 5: Hook errors
    UNKNOWN_HOOK_EVENT: Final[str] = "Unknown hook event '{event}'. Valid events: {valid}"
    HOOK_NOT_CALLABLE: Final[str] = "Hook registered for '{event}' must be callable, got {value!r}"


class DeprecationMessages:
    """Deprecation warning texts."""

    OPTIONS_REGISTRY: Final[str] = (
        "Accessing 'options.registry' is deprecated; use 'association.source.get_registry()' instead."
    )


class LoggingConstants:
    """Log message templates."""

    MODEL_DEFINED: Final[str] = "Defined model %s (table %s)"
    MODEL_REDEFINED: Final[str] = "Model %s is being redefined; previous definition is discarded"
    ASSOCIATION_DEFINED: Final[str] = "Defined association %s.%s(%s) as '%s'"
    ASSOCIATION_ADOPTED: Final[str] = "Adopted existing association %s.%s as pair of %s.%s"
    ACCESSOR_INSTALLED: Final[str] = "Installed accessor %s.%s -> %s.%s"
    ACCESSOR_SKIPPED: Final[str] = "Skipped accessor %s.%s: user-defined member present"
    FK_COMPOSITE_SKIPPED: Final[str] = (
        "Skipped foreign key constraint on '%s': %s has a composite primary key containing it"
    )
    HOOK_RETURNED_COROUTINE: Final[str] = (
        "Hook for '%s' returned a coroutine; hooks run synchronously and the coroutine was closed"
    )
