# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Association base class.

An :class:`Association` describes one declared relationship between a source
model and a target model. Instances are only created through the declaration
methods on :class:`~assocalchemy.orm.ORMModel`, which run the construction
pipeline in :mod:`assocalchemy.helpers`.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import weakref
from typing import Any, ClassVar, Dict, Iterable, List, Mapping, Optional, Tuple, Type, Union

from .constants import AccessorConstants, AssociationType, ErrorMessages, LoggingConstants
from .errors import ModelNotDefinedError
from .helpers import (
    _CONSTRUCTOR_SECRET,
    assert_association_model_is_defined,
    assert_association_unique,
    check_naming_collision,
    define_association,
    get_model,
    mixin_methods,
)
from .naming import join_key_name, pluralize, singularize, to_snake_case
from .options import AssociationOptions
from .orm import ModelReference, ORMModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssociationName:
    """Singular and plural forms of an association name."""
    singular: str
    plural: str


class Association:
    """
    Base class of every association kind.

    :class: Association
    :synopsis: Metadata and accessor implementations of one declared relationship
    """

    association_type: ClassVar[AssociationType]
    is_single_association: ClassVar[bool] = False
    is_multi_association: ClassVar[bool] = False

    # Logical accessor names exposed on the source model, and the implementing
    # method each one dispatches to when it differs from the logical name.
    accessor_methods: ClassVar[Tuple[str, ...]] = ()
    accessor_aliases: ClassVar[Dict[str, str]] = {}

    def __init__(
        self,
        secret: object,
        source: Type[ORMModel],
        target: Type[ORMModel],
        options: AssociationOptions,
        parent: Optional["Association"] = None,
    ) -> None:
        if secret is not _CONSTRUCTOR_SECRET:
            raise TypeError(ErrorMessages.DIRECT_INSTANTIATION.format(class_name=type(self).__name__))

        self.source = source
        self.target = target
        self.options = options
        self.is_aliased = options.alias is not None
        self.accessors: Dict[str, str] = {}

        # Non-owning handles: paired associations must not keep each other alive
        self._parent_ref: Optional[weakref.ReferenceType] = weakref.ref(parent) if parent is not None else None
        self._root_ref: weakref.ReferenceType = weakref.ref(
            parent.root_association if parent is not None else self
        )

        self.alias: str = options.alias or self._default_alias()
        self.name = self._build_name(self.alias)
        # assert_association_unique reads the alias from the options
        self.options.alias = self.alias

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.source.get_model_name()} -> {self.target.get_model_name()}, "
            f"alias={self.alias!r})"
        )

    # ---- identity ---------------------------------------------------------

    @property
    def root_association(self) -> "Association":
        """The association whose declaration created this alias on the source model."""
        root = self._root_ref()
        return root if root is not None else self

    @property
    def parent_association(self) -> Optional["Association"]:
        """The association whose construction created this one, None for user declarations."""
        return self._parent_ref() if self._parent_ref is not None else None

    @property
    def is_self_association(self) -> bool:
        return self.source is self.target

    def _default_alias(self) -> str:
        singular = to_snake_case(singularize(self.target.get_model_name()))
        return pluralize(singular) if self.is_multi_association else singular

    def _build_name(self, alias: str) -> AssociationName:
        if self.is_multi_association:
            return AssociationName(singular=singularize(alias), plural=alias)
        return AssociationName(singular=alias, plural=pluralize(alias))

    def get_registry(self):
        return self.source.get_registry()

    @property
    def underscored(self) -> bool:
        return self.get_registry().config.underscored

    # ---- construction -----------------------------------------------------

    @classmethod
    def associate(
        cls,
        source: Type[ORMModel],
        target: ModelReference,
        options: Union[AssociationOptions, Mapping[str, Any], None] = None,
        parent: Optional["Association"] = None,
        **kwargs: Any,
    ) -> "Association":
        """
        Declare an association of this kind from ``source`` to ``target``.

        ``target`` may be a model class or the name of a model defined in the
        source's registry. When ``parent`` is given the declaration is a side
        effect of the parent's construction; if the alias is already taken on
        ``source`` by an association of this kind pointing back at the parent's
        source, that association is adopted and returned instead.
        """
        normalized = AssociationOptions.normalize(options, **kwargs)

        if isinstance(target, str):
            assert_association_model_is_defined(source)
            resolved = get_model(source.get_registry(), target)
            if resolved is None:
                raise ModelNotDefinedError(
                    ErrorMessages.UNRESOLVED_TARGET.format(model_name=target), model_name=target
                )
            target = resolved

        if parent is not None and normalized.alias is not None:
            existing = source.associations.get(normalized.alias)
            if isinstance(existing, cls) and existing is not parent and existing.target is parent.source:
                logger.debug(
                    LoggingConstants.ASSOCIATION_ADOPTED,
                    source.get_model_name(),
                    normalized.alias,
                    parent.source.get_model_name(),
                    parent.alias,
                )
                existing._adopt_pair(parent)
                return existing

        def build(opts: AssociationOptions) -> "Association":
            association = cls(_CONSTRUCTOR_SECRET, source, target, opts, parent)
            association._setup()
            return association

        return define_association(cls, source, target, normalized, build)

    def _setup(self) -> None:
        """Kind-specific construction; runs after the common attributes are set."""
        raise NotImplementedError

    def _adopt_pair(self, parent: "Association") -> None:
        """Hook for kinds that track their paired association."""

    def _guard(self) -> None:
        check_naming_collision(self.source, self.alias)
        assert_association_unique(self.source, self.options)

    def _register(self) -> None:
        self.source.associations[self.alias] = self
        logger.debug(
            LoggingConstants.ASSOCIATION_DEFINED,
            self.source.get_model_name(),
            self.association_type.value,
            self.target.get_model_name(),
            self.alias,
        )

    def _install_accessors(self) -> None:
        self.accessors = self._build_accessors()
        mixin_methods(self, self.source, self.accessor_methods, self.accessor_aliases)

    def _build_accessors(self) -> Dict[str, str]:
        singular = self.name.singular
        plural = self.name.plural
        if self.is_single_association:
            return {
                AccessorConstants.GET: f"{AccessorConstants.GET_PREFIX}{singular}",
                AccessorConstants.SET: f"{AccessorConstants.SET_PREFIX}{singular}",
                AccessorConstants.CREATE: f"{AccessorConstants.CREATE_PREFIX}{singular}",
            }
        return {
            AccessorConstants.GET: f"{AccessorConstants.GET_PREFIX}{plural}",
            AccessorConstants.SET: f"{AccessorConstants.SET_PREFIX}{plural}",
            AccessorConstants.ADD_MULTIPLE: f"{AccessorConstants.ADD_PREFIX}{plural}",
            AccessorConstants.ADD: f"{AccessorConstants.ADD_PREFIX}{singular}",
            AccessorConstants.CREATE: f"{AccessorConstants.CREATE_PREFIX}{singular}",
            AccessorConstants.REMOVE: f"{AccessorConstants.REMOVE_PREFIX}{singular}",
            AccessorConstants.REMOVE_MULTIPLE: f"{AccessorConstants.REMOVE_PREFIX}{plural}",
            AccessorConstants.HAS_SINGLE: f"{AccessorConstants.HAS_PREFIX}{singular}",
            AccessorConstants.HAS_ALL: f"{AccessorConstants.HAS_PREFIX}{plural}",
            AccessorConstants.COUNT: f"{AccessorConstants.COUNT_PREFIX}{plural}",
        }

    # ---- shared helpers for kinds -----------------------------------------

    def _first_primary_key(self, model: Type[ORMModel]) -> str:
        primary_keys = model.get_primary_key_fields()
        if not primary_keys:
            raise ValueError(
                ErrorMessages.MISSING_PRIMARY_KEY.format(
                    model_name=model.get_model_name(), association_type=self.association_type.value
                )
            )
        return primary_keys[0]

    def _require_attribute(self, model: Type[ORMModel], key: str) -> None:
        if key not in model.get_attributes():
            raise ValueError(ErrorMessages.UNKNOWN_KEY_ATTRIBUTE.format(key=key, model_name=model.get_model_name()))

    def _key_name(self, prefix: str, key: str) -> str:
        return join_key_name(prefix, key, self.underscored)

    def _check_instance(self, value: Any) -> None:
        if not isinstance(value, self.target):
            raise TypeError(
                ErrorMessages.WRONG_TARGET_INSTANCE.format(
                    alias=self.alias, expected=self.target.get_model_name(), actual=type(value).__name__
                )
            )

    @staticmethod
    def _to_list(values: Union[ORMModel, Iterable[ORMModel], None]) -> List[ORMModel]:
        if values is None:
            return []
        if isinstance(values, ORMModel):
            return [values]
        return list(values)
