# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Shared scaffolding for association constructors.

Collision guards, foreign key synthesis, accessor installation, model
resolution and the association construction pipeline. Everything here runs
synchronously during model definition; nothing performs I/O.
"""

from __future__ import annotations

import logging
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Dict,
    Iterable,
    Mapping,
    Optional,
    Type,
    TypeVar,
    Union,
)

from .constants import (
    ErrorMessages,
    HookEvent,
    HookPayloadConstants,
    LoggingConstants,
)
from .errors import (
    AssociationError,
    InvalidTargetError,
    ModelNotDefinedError,
    NamingCollisionError,
)
from .naming import to_snake_case
from .options import AssociationOptions
from .orm import FieldMetadata, ForeignKeyReference, ModelRegistry, ORMModel, is_model_class

if TYPE_CHECKING:
    from .associations import Association

logger = logging.getLogger(__name__)

AssociationT = TypeVar("AssociationT", bound="Association")

# Gate for Association.__init__: only code inside this package holds it.
_CONSTRUCTOR_SECRET = object()


# -----------------------------------------------------------------------------
# Identity & collision guard
# -----------------------------------------------------------------------------

def check_naming_collision(source: Type[ORMModel], association_name: str) -> None:
    """
    Reject an association alias that is already an attribute of the source model.

    :param source: Model declaring the association
    :param association_name: Proposed alias
    :raises NamingCollisionError: If the alias names an existing attribute
    """
    if association_name in source.get_attributes():
        raise NamingCollisionError(
            ErrorMessages.NAMING_COLLISION.format(name=association_name, model_name=source.get_model_name()),
            model_name=source.get_model_name(),
            alias=association_name,
        )


def assert_association_unique(source: Type[ORMModel], options: AssociationOptions) -> None:
    """
    Reject an alias already used by another association on the source model.

    The message tells apart a duplicate user declaration from an association
    that was created as a side effect of another declaration (the inverse of a
    has_many, the pair of a belongs_to_many).

    :param source: Model declaring the association
    :param options: Normalized options; ``options.alias`` is checked
    :raises AssociationError: If ``source.associations`` already holds the alias
    """
    alias = options.alias
    existing = source.associations.get(alias)
    if existing is None:
        return

    created_by_root = existing.root_association

    # TODO: when the root's options match the new declaration, ignore the new one instead of raising
    if created_by_root is existing:
        raise AssociationError(
            ErrorMessages.DUPLICATE_ASSOCIATION.format(alias=alias, model_name=source.get_model_name()),
            model_name=source.get_model_name(),
            alias=alias,
        )
    raise AssociationError(
        ErrorMessages.IMPLICIT_ASSOCIATION_EXISTS.format(
            alias=alias,
            model_name=source.get_model_name(),
            root_source=created_by_root.source.get_model_name(),
            root_type=created_by_root.association_type.value,
            root_target=created_by_root.target.get_model_name(),
        ),
        model_name=source.get_model_name(),
        alias=alias,
        implicit=True,
    )


def assert_association_model_is_defined(model: Type[ORMModel]) -> None:
    """
    :raises ModelNotDefinedError: If the model has not been defined in a registry
    """
    if not model.is_defined():
        raise ModelNotDefinedError(
            ErrorMessages.MODEL_NOT_DEFINED.format(model_name=model.get_model_name()),
            model_name=model.get_model_name(),
        )


# -----------------------------------------------------------------------------
# Foreign key synthesis
# -----------------------------------------------------------------------------

def add_foreign_key_constraints(
    new_attribute: FieldMetadata,
    source: Type[ORMModel],
    options: AssociationOptions,
    key: Optional[str],
) -> None:
    """
    Attach referential metadata to a foreign key attribute pointing at ``source``.

    Constraints are opt-in: nothing happens unless the options set
    ``foreign_key_constraint``, ``on_delete`` or ``on_update``. Composite primary
    keys are only supported when ``key`` is not one of their columns; otherwise
    the constraint is skipped.

    :param new_attribute: Attribute definition to complete, mutated in place
    :param source: Referenced model
    :param options: Declaration options
    :param key: Referenced column, defaults to the first primary key column
    """
    if not (options.foreign_key_constraint or options.on_delete or options.on_update):
        return

    attributes = source.get_attributes()
    primary_keys = [
        attributes[name].column_name(name) for name in source.get_primary_key_fields()
    ]

    if len(primary_keys) == 1 or key not in primary_keys:
        target_key = key or (primary_keys[0] if primary_keys else None)
        if target_key is None:
            return
        new_attribute.references = ForeignKeyReference(model=source.get_table_name(), key=target_key)
        new_attribute.on_delete = options.on_delete
        new_attribute.on_update = options.on_update
        return

    logger.debug(LoggingConstants.FK_COMPOSITE_SKIPPED, key, source.get_model_name())


# -----------------------------------------------------------------------------
# Accessor installation
# -----------------------------------------------------------------------------

def _make_forwarder(association: "Association", method_name: str, exposed_name: str) -> Callable[..., Any]:
    def accessor(instance: ORMModel, *args: Any, **kwargs: Any) -> Any:
        return getattr(association, method_name)(instance, *args, **kwargs)

    accessor.__name__ = exposed_name
    accessor.__qualname__ = f"{association.source.get_model_name()}.{accessor.__name__}"
    return accessor


def mixin_methods(
    association: "Association",
    model: Type[ORMModel],
    methods: Iterable[str],
    aliases: Optional[Mapping[str, str]] = None,
) -> None:
    """
    Install association accessors in a model's capability table.

    Each logical method name is exposed under ``association.accessors[name]``.
    Members the user defined on the class itself, and user-registered accessors,
    are left alone. ``aliases`` maps a logical name to a different method of the
    association, so several exposed accessors can share one implementation.

    :param association: Association whose methods the accessors call
    :param model: Model class receiving the accessors
    :param methods: Logical method names to expose
    :param aliases: Mapping from logical name to implementing method name
    """
    for method in methods:
        target_method_name = association.accessors[method]

        # don't override custom methods
        if target_method_name in model.__dict__:
            logger.debug(LoggingConstants.ACCESSOR_SKIPPED, model.get_model_name(), target_method_name)
            continue
        existing = model.get_own_accessor(target_method_name)
        if existing is not None and existing.is_user_defined:
            logger.debug(LoggingConstants.ACCESSOR_SKIPPED, model.get_model_name(), target_method_name)
            continue

        real_method = (aliases or {}).get(method) or method
        model.install_generated_accessor(target_method_name, _make_forwarder(association, real_method, target_method_name))
        logger.debug(
            LoggingConstants.ACCESSOR_INSTALLED,
            model.get_model_name(),
            target_method_name,
            type(association).__name__,
            real_method,
        )


# -----------------------------------------------------------------------------
# Model resolution
# -----------------------------------------------------------------------------

def get_model(
    registry: ModelRegistry,
    model: Union[str, Type[ORMModel]],
) -> Optional[Type[ORMModel]]:
    """
    Resolve a model reference.

    :param registry: Registry used for name lookups
    :param model: Model class or registered model name
    :returns: The model class, or None when the name is not defined yet
    """
    if isinstance(model, str):
        if not registry.is_defined(model):
            return None
        return registry.model(model)

    return model


def remove_undefined(values: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of ``values`` without the entries whose value is None."""
    return {key: value for key, value in values.items() if value is not None}


# -----------------------------------------------------------------------------
# Construction pipeline
# -----------------------------------------------------------------------------

def _declaration_method_name(association_class: type) -> str:
    association_type = getattr(association_class, "association_type", None)
    if association_type is not None:
        return association_type.value
    return to_snake_case(association_class.__name__)


def define_association(
    association_class: Type[AssociationT],
    source: Type[ORMModel],
    target: Any,
    options: Union[AssociationOptions, Mapping[str, Any], None],
    build: Callable[[AssociationOptions], AssociationT],
) -> AssociationT:
    """
    Validate, normalize and build an association.

    Steps, each fatal for this call:

    1. ``target`` must be an ORMModel subclass.
    2. ``source`` and ``target`` must both be defined in a registry.
    3. Options are deep-copied, given a deprecated ``registry`` accessor, and
       ``hooks`` is coerced to a bool (default False).
    4. ``before_associate`` hooks run on ``source`` when ``hooks`` is set.
    5. ``build(options)`` constructs and registers the association.
    6. ``after_associate`` hooks run on ``source`` when ``hooks`` is set.

    Nothing is rolled back when a later step fails.

    :param association_class: Association kind being declared
    :param source: Model declaring the association
    :param target: Related model
    :param options: Declaration options
    :param build: Kind-specific constructor receiving the normalized options
    :returns: The constructed association
    """
    # @@ STEP 1: Target validity
    if not is_model_class(target):
        raise InvalidTargetError(
            ErrorMessages.INVALID_TARGET.format(
                source_name=source.get_model_name(),
                method_name=_declaration_method_name(association_class),
                target=target,
            ),
            model_name=source.get_model_name(),
        )

    # @@ STEP 2: Both sides must be fully defined
    assert_association_model_is_defined(source)
    assert_association_model_is_defined(target)

    # @@ STEP 3: Options normalization
    options = AssociationOptions.normalize(options)
    registry = source.get_registry()
    options.attach_registry(registry, warn=registry.config.deprecation_warnings)
    options.hooks = bool(options.hooks or False)

    # @@ STEP 4: Pre-hook
    if options.hooks:
        source.run_hooks(
            HookEvent.BEFORE_ASSOCIATE,
            {
                HookPayloadConstants.SOURCE: source,
                HookPayloadConstants.TARGET: target,
                HookPayloadConstants.ASSOCIATION_CLASS: association_class,
                HookPayloadConstants.REGISTRY: registry,
            },
            options,
        )

    # @@ STEP 5: Kind-specific construction
    association = build(options)

    # @@ STEP 6: Post-hook
    if options.hooks:
        source.run_hooks(
            HookEvent.AFTER_ASSOCIATE,
            {
                HookPayloadConstants.SOURCE: source,
                HookPayloadConstants.TARGET: target,
                HookPayloadConstants.ASSOCIATION_CLASS: association_class,
                HookPayloadConstants.ASSOCIATION: association,
                HookPayloadConstants.REGISTRY: registry,
            },
            options,
        )

    return association
