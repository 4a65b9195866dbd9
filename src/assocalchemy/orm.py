# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Model metadata layer: field metadata, the model base class and the model registry.

Models are pydantic models. Column-level metadata rides on each pydantic field
(``json_schema_extra``) and is collected into a per-class attribute mapping when
the model is defined in a :class:`ModelRegistry`. Associations grow that mapping
with synthesized foreign keys and add accessors to the per-class capability table.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
import datetime
import decimal
import logging
import uuid
from types import MethodType
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Dict,
    List,
    Mapping,
    Optional,
    Tuple,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
)

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.fields import FieldInfo

from .config import RegistryConfig
from .constants import (
    AccessorConstants,
    CascadeAction,
    DataType,
    ErrorMessages,
    HookEvent,
    LoggingConstants,
    ModelMetadataConstants,
)
from .hooks import HookCollection, HookFunction
from .naming import pluralize

if TYPE_CHECKING:
    from .associations import Association
    from .belongs_to import BelongsTo
    from .belongs_to_many import BelongsToMany
    from .has_many import HasMany
    from .has_one import HasOne
    from .options import AssociationOptions

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Type variables
# -----------------------------------------------------------------------------

ModelType = TypeVar("ModelType", bound="ORMModel")
ModelReference = Union[str, Type["ORMModel"]]


# -----------------------------------------------------------------------------
# Field-level metadata
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ForeignKeyReference:
    """
    Target of a foreign key: storage table and column.

    :class: ForeignKeyReference
    :synopsis: Referential metadata attached to a foreign key attribute
    """
    model: str
    key: str


@dataclass
class FieldMetadata:
    """
    Column-like definition of a model attribute.

    :class: FieldMetadata
    :synopsis: Metadata container for attribute definitions
    """
    data_type: Optional[Union[DataType, str]] = None
    primary_key: bool = False
    unique: bool = False
    allow_null: Optional[bool] = None
    column: Optional[str] = None  # storage column name when it differs from the attribute name
    references: Optional[ForeignKeyReference] = None
    on_delete: Optional[CascadeAction] = None
    on_update: Optional[CascadeAction] = None
    default_value: Optional[Any] = None

    def column_name(self, attribute_name: str) -> str:
        return self.column or attribute_name


@dataclass
class ThroughTable:
    """
    Join table metadata shared by the two sides of a many-to-many association.

    :class: ThroughTable
    :synopsis: Named attribute mapping for a many-to-many join table
    """
    name: str
    attributes: Dict[str, FieldMetadata] = field(default_factory=dict)

    def merge_attributes_default(self, attributes: Mapping[str, FieldMetadata]) -> None:
        _merge_attribute_defaults(self.attributes, attributes)

    def get_primary_key_fields(self) -> List[str]:
        return [name for name, meta in self.attributes.items() if meta.primary_key]


@dataclass
class AccessorEntry:
    """
    Capability table entry: an accessor function and where it came from.

    Generated entries forward to an association; user entries are registered
    explicitly through :meth:`ORMModel.register_accessor` and are never replaced
    by generated ones.
    """
    function: Callable[..., Any]
    origin: str = AccessorConstants.ORIGIN_GENERATED

    @property
    def is_user_defined(self) -> bool:
        return self.origin == AccessorConstants.ORIGIN_USER


_PYTHON_TYPE_TO_DATA_TYPE: Dict[type, DataType] = {
    bool: DataType.BOOL,
    int: DataType.INT64,
    float: DataType.DOUBLE,
    decimal.Decimal: DataType.DECIMAL,
    str: DataType.STRING,
    uuid.UUID: DataType.UUID,
    datetime.datetime: DataType.TIMESTAMP,
    datetime.date: DataType.DATE,
}


def _infer_data_type(annotation: Any) -> Optional[DataType]:
    """Map a field annotation (unwrapping Optional) to a DataType."""
    if get_origin(annotation) is Union:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) != 1:
            return None
        annotation = args[0]
    if isinstance(annotation, type):
        return _PYTHON_TYPE_TO_DATA_TYPE.get(annotation)
    return None


def _merge_attribute_defaults(
    existing_attributes: Dict[str, FieldMetadata],
    new_attributes: Mapping[str, FieldMetadata],
) -> None:
    """
    Merge attribute definitions, letting existing values win.

    A new attribute is added as-is; for an attribute that already exists, only
    the properties still unset (None) on the existing definition are filled in.
    """
    for name, new_meta in new_attributes.items():
        current = existing_attributes.get(name)
        if current is None:
            existing_attributes[name] = replace(new_meta)
            continue
        for meta_field in fields(FieldMetadata):
            if getattr(current, meta_field.name) is None:
                setattr(current, meta_field.name, getattr(new_meta, meta_field.name))


def model_field(
    default: Any = ...,
    *,
    data_type: Optional[Union[DataType, str]] = None,
    primary_key: bool = False,
    unique: bool = False,
    allow_null: Optional[bool] = None,
    column: Optional[str] = None,
    references: Optional[ForeignKeyReference] = None,
    on_delete: Optional[CascadeAction] = None,
    on_update: Optional[CascadeAction] = None,
    default_factory: Optional[Callable[[], Any]] = None,
    alias: Optional[str] = None,
    title: Optional[str] = None,
    description: Optional[str] = None,
    json_schema_extra: Optional[Dict[str, Any]] = None,
) -> Any:
    """
    Create a Pydantic Field with attached attribute metadata.

    Args:
        default: Default value for the field
        data_type: Column data type; inferred from the annotation when omitted
        primary_key: Whether the attribute is part of the primary key
        column: Storage column name, when different from the attribute name
        references: Explicit foreign key target
    """
    if isinstance(data_type, str) and not isinstance(data_type, DataType):
        # Known names become DataType members, anything else stays a custom type string
        if data_type.upper() in DataType.__members__:
            data_type = DataType[data_type.upper()]

    metadata = FieldMetadata(
        data_type=data_type,
        primary_key=primary_key,
        unique=unique,
        allow_null=False if primary_key and allow_null is None else allow_null,
        column=column,
        references=references,
        on_delete=on_delete,
        on_update=on_update,
        default_value=None if default is ... else default,
    )

    if type(json_schema_extra) is not dict:
        json_schema_extra = {}
    # Store the metadata object itself to preserve types
    json_schema_extra[ModelMetadataConstants.FIELD_METADATA] = metadata

    field_kwargs = {
        "json_schema_extra": json_schema_extra,
        "alias": alias,
        "title": title,
        "description": description,
    }

    if default_factory is not None:
        return Field(default_factory=default_factory, **field_kwargs)
    return Field(default=default, **field_kwargs)


# -----------------------------------------------------------------------------
# Model registry
# -----------------------------------------------------------------------------

class ModelRegistry:
    """
    Store of defined model classes, keyed by model name.

    A registry is created once at application bootstrap and passed explicitly
    to whatever needs it; defining a model attaches the registry to the class,
    which is what marks the model as ready for association declarations.
    """

    def __init__(self, config: Optional[Union[RegistryConfig, Mapping[str, Any]]] = None) -> None:
        # @@ STEP 1: Configuration
        if config is None:
            config = RegistryConfig()
        elif not isinstance(config, RegistryConfig):
            config = RegistryConfig.model_validate(config)
        self.config: RegistryConfig = config

        # @@ STEP 2: Core model storage
        self.models: Dict[str, Type["ORMModel"]] = {}
        self.through_tables: Dict[str, ThroughTable] = {}

        # @@ STEP 3: Field metadata cache (hot path)
        # Keyed by id(field_info) because FieldInfo may not be hashable; values are FieldMetadata or None
        self._field_metadata_cache: Dict[int, Optional[FieldMetadata]] = {}

    def __repr__(self) -> str:
        return f"ModelRegistry(models={sorted(self.models)})"

    def __contains__(self, name: object) -> bool:
        return name in self.models

    # ---- definition -------------------------------------------------------

    def define(
        self,
        model: Type[ModelType],
        name: Optional[str] = None,
        table_name: Optional[str] = None,
    ) -> Type[ModelType]:
        """
        Define a model class in this registry.

        :param model: ORMModel subclass to define
        :param name: Registered model name, defaults to the class name
        :param table_name: Storage table name, defaults to the pluralized model name
        :returns: The same class, now carrying its metadata
        :raises TypeError: If ``model`` is not an ORMModel subclass
        """
        if not is_model_class(model):
            raise TypeError(ErrorMessages.NOT_A_MODEL.format(value=model))

        model_name = name if name is not None else model.__name__
        hooks = model._own_hooks()
        hooks.run(HookEvent.BEFORE_DEFINE, model)

        # @@ STEP 1: Handle model redefinition gracefully
        if model_name in self.models:
            logger.warning(LoggingConstants.MODEL_REDEFINED, model_name)
            self._cleanup_model_references(model_name)

        # @@ STEP 2: Resolve the table name
        if table_name is None:
            table_name = model_name if self.config.freeze_table_name else pluralize(model_name)

        # @@ STEP 3: Attach per-class metadata; own dicts only, never inherited ones
        own = model.__dict__
        setattr(model, ModelMetadataConstants.MODEL_NAME, model_name)
        setattr(model, ModelMetadataConstants.TABLE_NAME, table_name)
        setattr(model, ModelMetadataConstants.ATTRIBUTES, self._collect_attributes(model))
        setattr(model, ModelMetadataConstants.ASSOCIATIONS, {})
        if ModelMetadataConstants.ACCESSORS not in own:
            setattr(model, ModelMetadataConstants.ACCESSORS, {})

        # @@ STEP 4: Registering the registry last marks the model as defined
        setattr(model, ModelMetadataConstants.REGISTRY, self)
        self.models[model_name] = model

        hooks.run(HookEvent.AFTER_DEFINE, model)
        logger.debug(LoggingConstants.MODEL_DEFINED, model_name, table_name)
        return model

    def register(
        self,
        name: Optional[str] = None,
        table_name: Optional[str] = None,
    ) -> Callable[[Type[ModelType]], Type[ModelType]]:
        """Decorator form of :meth:`define`."""

        def decorator(cls: Type[ModelType]) -> Type[ModelType]:
            return self.define(cls, name=name, table_name=table_name)

        return decorator

    def _collect_attributes(self, model: Type["ORMModel"]) -> Dict[str, FieldMetadata]:
        attributes: Dict[str, FieldMetadata] = {}
        for field_name, field_info in model.model_fields.items():
            meta = self.get_field_metadata(field_info)
            # Copy so synthesized defaults never leak into the shared field definition
            meta = replace(meta) if meta is not None else FieldMetadata()
            if meta.data_type is None:
                meta.data_type = _infer_data_type(field_info.annotation)
            attributes[field_name] = meta
        return attributes

    def _cleanup_model_references(self, model_name: str) -> None:
        """
        Detach a model that is about to be replaced.

        Args:
            model_name: Name of the model to clean up
        """
        previous = self.models.pop(model_name, None)
        if previous is not None and previous.__dict__.get(ModelMetadataConstants.REGISTRY) is self:
            setattr(previous, ModelMetadataConstants.REGISTRY, None)

    # ---- lookup -----------------------------------------------------------

    def is_defined(self, name: str) -> bool:
        return name in self.models

    def model(self, name: str) -> Type["ORMModel"]:
        """
        Get a defined model by name.

        :raises KeyError: If no model is registered under ``name``
        """
        try:
            return self.models[name]
        except KeyError:
            raise KeyError(ErrorMessages.MODEL_NOT_REGISTERED.format(model_name=name)) from None

    def get_model_by_name(self, name: str) -> Optional[Type["ORMModel"]]:
        """
        Get a model by name from the registry.

        Args:
            name: The model name to look up

        Returns:
            Optional[Type[ORMModel]]: The model class if found, None otherwise
        """
        return self.models.get(name)

    def get_through_table(self, name: str) -> ThroughTable:
        """Get the join table metadata registered under ``name``, creating it on first use."""
        table = self.through_tables.get(name)
        if table is None:
            table = ThroughTable(name=name)
            self.through_tables[name] = table
        return table

    def get_field_metadata(self, field_info: FieldInfo) -> Optional[FieldMetadata]:
        """
        Get attribute metadata from field info with caching (hot path).

        :param field_info: Pydantic field info
        :type field_info: FieldInfo
        :returns: Field metadata or None
        :rtype: Optional[FieldMetadata]
        """
        # @@ STEP: Cache by identity of FieldInfo (stable per model class)
        cache_key = id(field_info)
        cached = self._field_metadata_cache.get(cache_key, None)
        if cached is not None or cache_key in self._field_metadata_cache:
            return cached

        result: Optional[FieldMetadata] = None
        if field_info.json_schema_extra and isinstance(field_info.json_schema_extra, dict):
            meta = field_info.json_schema_extra.get(ModelMetadataConstants.FIELD_METADATA)
            if isinstance(meta, FieldMetadata):
                result = meta
            elif isinstance(meta, dict):
                result = FieldMetadata(**meta)

        # Store even when None to avoid repeated dict lookups and type checks
        self._field_metadata_cache[cache_key] = result
        return result

    # ---- teardown ---------------------------------------------------------

    def remove(self, name: str) -> bool:
        """Remove a model from the registry. Returns False when it was not defined."""
        if name not in self.models:
            return False
        self._cleanup_model_references(name)
        return True

    def clear(self) -> None:
        """Remove every model and through table and reset caches."""
        for name in list(self.models):
            self._cleanup_model_references(name)
        self.through_tables.clear()
        # id(FieldInfo) values can be reused once classes are collected
        self._field_metadata_cache.clear()


# -----------------------------------------------------------------------------
# Base model
# -----------------------------------------------------------------------------

def is_model_class(value: Any) -> bool:
    """Check that a value is an ORMModel subclass (the class itself, not an instance)."""
    return isinstance(value, type) and issubclass(value, ORMModel)


class ORMModel(BaseModel):
    """
    Base model for all mapped entities with metadata helpers.

    Accessors generated by associations are not set on the class: they live in
    the per-class capability table and are resolved on attribute lookup, after
    regular attributes and methods.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True, validate_assignment=True, use_enum_values=False, extra="allow"
    )

    associations: ClassVar[Dict[str, "Association"]] = {}

    _associated: Dict[str, Any] = PrivateAttr(default_factory=dict)

    if not TYPE_CHECKING:
        def __getattr__(self, item: str) -> Any:
            try:
                return super().__getattr__(item)
            except AttributeError:
                entry = type(self).get_accessor(item)
                if entry is None:
                    raise
                return MethodType(entry.function, self)

    def _identity_key(self) -> Optional[Tuple[Any, ...]]:
        primary_key_fields = self.get_primary_key_fields()
        if not primary_key_fields:
            return None
        values = tuple(getattr(self, name, None) for name in primary_key_fields)
        if any(value is None for value in values):
            return None
        return values

    def __hash__(self) -> int:
        """Make model instances hashable for use in sets."""
        # Use primary key if available, otherwise use id() for object identity
        key = self._identity_key()
        if key is None:
            return hash(id(self))
        return hash((self.__class__.__name__, key))

    def __eq__(self, other: object) -> bool:
        """Define equality based on primary key or object identity."""
        if not isinstance(other, self.__class__):
            return False
        self_key = self._identity_key()
        other_key = other._identity_key()
        if self_key is None or other_key is None:
            return self is other
        return self_key == other_key

    # ---- definition state -------------------------------------------------

    @classmethod
    def get_registry(cls) -> Optional[ModelRegistry]:
        """Registry this exact class was defined in, or None when not defined."""
        return cls.__dict__.get(ModelMetadataConstants.REGISTRY)

    @classmethod
    def is_defined(cls) -> bool:
        return cls.get_registry() is not None

    @classmethod
    def get_model_name(cls) -> str:
        return cls.__dict__.get(ModelMetadataConstants.MODEL_NAME) or cls.__name__

    @classmethod
    def get_table_name(cls) -> str:
        table_name = cls.__dict__.get(ModelMetadataConstants.TABLE_NAME)
        return table_name if table_name is not None else pluralize(cls.__name__)

    # ---- attributes -------------------------------------------------------

    @classmethod
    def get_attributes(cls) -> Dict[str, FieldMetadata]:
        """
        Attribute mapping of this model: declared fields plus synthesized foreign keys.

        The returned dict is the live mapping; treat it as read-only and use
        :meth:`merge_attributes_default` to add attributes.
        """
        attributes = cls.__dict__.get(ModelMetadataConstants.ATTRIBUTES)
        if attributes is None:
            attributes = {}
            setattr(cls, ModelMetadataConstants.ATTRIBUTES, attributes)
        return attributes

    @classmethod
    def get_primary_key_fields(cls) -> List[str]:
        return [name for name, meta in cls.get_attributes().items() if meta.primary_key]

    @classmethod
    def merge_attributes_default(cls, attributes: Mapping[str, FieldMetadata]) -> None:
        """Add attributes, keeping any property already set on an existing definition."""
        _merge_attribute_defaults(cls.get_attributes(), attributes)

    # ---- hooks ------------------------------------------------------------

    @classmethod
    def _own_hooks(cls) -> HookCollection:
        hooks = cls.__dict__.get(ModelMetadataConstants.HOOKS)
        if hooks is None:
            hooks = HookCollection()
            setattr(cls, ModelMetadataConstants.HOOKS, hooks)
        return hooks

    @classmethod
    def add_hook(cls, event: Union[HookEvent, str], hook: HookFunction) -> None:
        cls._own_hooks().add(event, hook)

    @classmethod
    def remove_hook(cls, event: Union[HookEvent, str], hook: HookFunction) -> bool:
        return cls._own_hooks().remove(event, hook)

    @classmethod
    def has_hook(cls, event: Union[HookEvent, str]) -> bool:
        return cls._own_hooks().has(event)

    @classmethod
    def run_hooks(cls, event: Union[HookEvent, str], *args: Any) -> None:
        cls._own_hooks().run(event, *args)

    # ---- capability table -------------------------------------------------

    @classmethod
    def _own_accessors(cls) -> Dict[str, AccessorEntry]:
        table = cls.__dict__.get(ModelMetadataConstants.ACCESSORS)
        if table is None:
            table = {}
            setattr(cls, ModelMetadataConstants.ACCESSORS, table)
        return table

    @classmethod
    def register_accessor(cls, name: str, function: Callable[..., Any]) -> None:
        """
        Register a user accessor on this class.

        User accessors take the instance as first argument and always win over
        accessors generated by associations.
        """
        cls._own_accessors()[name] = AccessorEntry(function=function, origin=AccessorConstants.ORIGIN_USER)

    @classmethod
    def install_generated_accessor(cls, name: str, function: Callable[..., Any]) -> None:
        cls._own_accessors()[name] = AccessorEntry(function=function, origin=AccessorConstants.ORIGIN_GENERATED)

    @classmethod
    def get_own_accessor(cls, name: str) -> Optional[AccessorEntry]:
        return cls._own_accessors().get(name)

    @classmethod
    def get_accessor(cls, name: str) -> Optional[AccessorEntry]:
        """Resolve an accessor through the class hierarchy, nearest class first."""
        for klass in cls.__mro__:
            table = klass.__dict__.get(ModelMetadataConstants.ACCESSORS)
            if table and name in table:
                return table[name]
        return None

    @classmethod
    def get_accessor_names(cls) -> List[str]:
        names: List[str] = []
        for klass in cls.__mro__:
            for name in klass.__dict__.get(ModelMetadataConstants.ACCESSORS) or {}:
                if name not in names:
                    names.append(name)
        return names

    # ---- associations -----------------------------------------------------

    @classmethod
    def has_association(cls, alias: str) -> bool:
        return alias in cls.__dict__.get(ModelMetadataConstants.ASSOCIATIONS, {})

    @classmethod
    def get_association(cls, alias: str) -> "Association":
        try:
            return cls.__dict__[ModelMetadataConstants.ASSOCIATIONS][alias]
        except KeyError:
            raise KeyError(f"Association '{alias}' is not defined on model {cls.get_model_name()}") from None

    @classmethod
    def belongs_to(
        cls,
        target: ModelReference,
        options: Optional[Union["AssociationOptions", Mapping[str, Any]]] = None,
        **kwargs: Any,
    ) -> "BelongsTo":
        """Declare that this model holds a foreign key to ``target``."""
        from .belongs_to import BelongsTo
        return BelongsTo.associate(cls, target, options, **kwargs)

    @classmethod
    def has_one(
        cls,
        target: ModelReference,
        options: Optional[Union["AssociationOptions", Mapping[str, Any]]] = None,
        **kwargs: Any,
    ) -> "HasOne":
        """Declare that at most one ``target`` instance holds a foreign key to this model."""
        from .has_one import HasOne
        return HasOne.associate(cls, target, options, **kwargs)

    @classmethod
    def has_many(
        cls,
        target: ModelReference,
        options: Optional[Union["AssociationOptions", Mapping[str, Any]]] = None,
        **kwargs: Any,
    ) -> "HasMany":
        """Declare that many ``target`` instances hold a foreign key to this model."""
        from .has_many import HasMany
        return HasMany.associate(cls, target, options, **kwargs)

    @classmethod
    def belongs_to_many(
        cls,
        target: ModelReference,
        options: Optional[Union["AssociationOptions", Mapping[str, Any]]] = None,
        **kwargs: Any,
    ) -> "BelongsToMany":
        """Declare a many-to-many association with ``target`` through a join table."""
        from .belongs_to_many import BelongsToMany
        return BelongsToMany.associate(cls, target, options, **kwargs)

    # ---- per-instance association cache ----------------------------------

    def get_associated(self, alias: str, default: Any = None) -> Any:
        return self._associated.get(alias, default)

    def set_associated(self, alias: str, value: Any) -> None:
        self._associated[alias] = value

    def clear_associated(self, alias: str) -> None:
        self._associated.pop(alias, None)
