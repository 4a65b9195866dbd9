# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Many-to-many association through a join table.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Iterable, List, Optional, Tuple, Type, Union

from .associations import Association
from .constants import AccessorConstants, AssociationType, ErrorMessages
from .errors import AssociationError
from .helpers import add_foreign_key_constraints, remove_undefined
from .naming import pluralize, singularize, to_snake_case
from .orm import FieldMetadata, ORMModel, ThroughTable


class BelongsToMany(Association):
    """
    ``Source.belongs_to_many(Target, through="SourceTargets")``.

    The join table holds ``foreign_key`` (pointing at the source) and
    ``other_key`` (pointing at the target); together they form its primary key.
    The declaration also creates, or adopts, the paired association on the
    target, which shares the same join table with the two keys swapped.
    """

    association_type: ClassVar[AssociationType] = AssociationType.BELONGS_TO_MANY
    is_multi_association: ClassVar[bool] = True
    accessor_methods: ClassVar[Tuple[str, ...]] = (
        AccessorConstants.GET,
        AccessorConstants.COUNT,
        AccessorConstants.HAS_SINGLE,
        AccessorConstants.HAS_ALL,
        AccessorConstants.SET,
        AccessorConstants.ADD,
        AccessorConstants.ADD_MULTIPLE,
        AccessorConstants.REMOVE,
        AccessorConstants.REMOVE_MULTIPLE,
        AccessorConstants.CREATE,
    )
    accessor_aliases: ClassVar[Dict[str, str]] = {
        AccessorConstants.HAS_SINGLE: "has",
        AccessorConstants.HAS_ALL: "has",
        AccessorConstants.ADD_MULTIPLE: AccessorConstants.ADD,
        AccessorConstants.REMOVE_MULTIPLE: AccessorConstants.REMOVE,
    }

    source_key: str
    target_key: str
    foreign_key: str
    other_key: str
    inverse_alias: str
    through: ThroughTable
    paired: Optional["BelongsToMany"] = None

    def _setup(self) -> None:
        # @@ STEP 1: Join table and key names
        if not self.options.through:
            raise ValueError(
                ErrorMessages.MISSING_THROUGH.format(
                    source_name=self.source.get_model_name(), target_name=self.target.get_model_name()
                )
            )
        self.source_key = self.options.source_key or self._first_primary_key(self.source)
        self.target_key = self.options.target_key or self._first_primary_key(self.target)
        self._require_attribute(self.source, self.source_key)
        self._require_attribute(self.target, self.target_key)

        source_singular = to_snake_case(singularize(self.source.get_model_name()))
        target_singular = to_snake_case(singularize(self.target.get_model_name()))
        if self.is_self_association and not self.options.other_key:
            # Both keys would otherwise derive the same name
            target_singular = self.name.singular
        self.foreign_key = self.options.foreign_key or self._key_name(source_singular, self.source_key)
        self.other_key = self.options.other_key or self._key_name(target_singular, self.target_key)
        self.inverse_alias = self.options.inverse_alias or pluralize(source_singular)
        if self.is_self_association:
            self._check_self_association_names()

        # @@ STEP 2: Guard before any metadata is touched
        self._guard()

        # @@ STEP 3: Join table columns
        self.through = self.get_registry().get_through_table(self.options.through)
        self.through.merge_attributes_default(
            {
                self.foreign_key: self._join_column(self.source, self.source_key),
                self.other_key: self._join_column(self.target, self.target_key),
            }
        )

        self._register()

        # @@ STEP 4: Paired association on the target
        parent = self.parent_association
        if isinstance(parent, BelongsToMany):
            self.paired = parent
        else:
            self.paired = BelongsToMany.associate(
                self.target,
                self.source,
                {
                    "alias": self.inverse_alias,
                    "through": self.options.through,
                    "foreign_key": self.other_key,
                    "other_key": self.foreign_key,
                    "source_key": self.target_key,
                    "target_key": self.source_key,
                    "foreign_key_constraint": self.options.foreign_key_constraint,
                    "on_delete": self.options.on_delete,
                    "on_update": self.options.on_update,
                },
                parent=self,
            )

        self._install_accessors()

    def _check_self_association_names(self) -> None:
        clash = None
        if self.foreign_key == self.other_key:
            clash = self.foreign_key
        elif not isinstance(self.parent_association, BelongsToMany) and self.inverse_alias == self.alias:
            clash = self.alias
        if clash is not None:
            raise AssociationError(
                ErrorMessages.AMBIGUOUS_SELF_ASSOCIATION.format(model_name=self.source.get_model_name(), name=clash),
                model_name=self.source.get_model_name(),
                alias=self.alias,
            )

    def _join_column(self, model: Type[ORMModel], key: str) -> FieldMetadata:
        key_meta = model.get_attributes()[key]
        column = FieldMetadata(
            **remove_undefined(
                {
                    "data_type": key_meta.data_type,
                    "primary_key": True,
                    "allow_null": False,
                }
            )
        )
        add_foreign_key_constraints(column, model, self.options, key_meta.column_name(key))
        return column

    def _adopt_pair(self, parent: Association) -> None:
        if self.paired is None and isinstance(parent, BelongsToMany):
            self.paired = parent

    # ---- accessor implementations -----------------------------------------

    def _items(self, instance: ORMModel) -> List[ORMModel]:
        items = instance.get_associated(self.alias)
        if items is None:
            items = []
            instance.set_associated(self.alias, items)
        return items

    def _paired_items(self, target: ORMModel) -> Optional[List[ORMModel]]:
        if self.paired is None:
            return None
        return self.paired._items(target)

    def get(self, instance: ORMModel) -> List[ORMModel]:
        return list(self._items(instance))

    def count(self, instance: ORMModel) -> int:
        return len(self._items(instance))

    def has(self, instance: ORMModel, targets: Union[ORMModel, Iterable[ORMModel]]) -> bool:
        items = self._items(instance)
        return all(target in items for target in self._to_list(targets))

    def add(self, instance: ORMModel, targets: Union[ORMModel, Iterable[ORMModel]]) -> None:
        items = self._items(instance)
        for target in self._to_list(targets):
            self._check_instance(target)
            if target not in items:
                items.append(target)
            paired_items = self._paired_items(target)
            if paired_items is not None and instance not in paired_items:
                paired_items.append(instance)

    def remove(self, instance: ORMModel, targets: Union[ORMModel, Iterable[ORMModel]]) -> None:
        items = self._items(instance)
        for target in self._to_list(targets):
            if target in items:
                items.remove(target)
            paired_items = self._paired_items(target)
            if paired_items is not None and instance in paired_items:
                paired_items.remove(instance)

    def set(self, instance: ORMModel, targets: Union[ORMModel, Iterable[ORMModel], None]) -> None:
        new_targets = self._to_list(targets)
        stale = [item for item in self._items(instance) if item not in new_targets]
        self.remove(instance, stale)
        self.add(instance, new_targets)

    def create(self, instance: ORMModel, **values: Any) -> ORMModel:
        target = self.target(**values)
        self.add(instance, target)
        return target

    def through_row(self, instance: ORMModel, target: ORMModel) -> Dict[str, Any]:
        """Join table row linking ``instance`` to ``target``."""
        return {
            self.foreign_key: getattr(instance, self.source_key, None),
            self.other_key: getattr(target, self.target_key, None),
        }
