# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
One-to-many association where each target instance holds a foreign key to the source.
"""

from __future__ import annotations

from typing import Any, ClassVar, Dict, Iterable, List, Tuple, Union

from .associations import Association
from .belongs_to import BelongsTo
from .constants import AccessorConstants, AssociationType
from .naming import singularize, to_snake_case
from .orm import ORMModel


class HasMany(Association):
    """
    ``Source.has_many(Target)``: every ``Target`` gets a foreign key to ``Source``.

    Single and multiple forms of add/remove/has share one implementation each,
    wired through ``accessor_aliases``.
    """

    association_type: ClassVar[AssociationType] = AssociationType.HAS_MANY
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
    inverse: BelongsTo

    def _setup(self) -> None:
        self.source_key = self.options.source_key or self._first_primary_key(self.source)
        self._require_attribute(self.source, self.source_key)
        self._guard()

        inverse_alias = self.options.inverse_alias or to_snake_case(singularize(self.source.get_model_name()))
        self.inverse = BelongsTo.associate(
            self.target,
            self.source,
            {
                "alias": inverse_alias,
                "foreign_key": self.options.foreign_key or self._key_name(inverse_alias, self.source_key),
                "target_key": self.source_key,
                "foreign_key_constraint": self.options.foreign_key_constraint,
                "on_delete": self.options.on_delete,
                "on_update": self.options.on_update,
            },
            parent=self,
        )

        self._register()
        self._install_accessors()

    @property
    def foreign_key(self) -> str:
        return self.inverse.foreign_key

    # ---- accessor implementations -----------------------------------------

    def _items(self, instance: ORMModel) -> List[ORMModel]:
        items = instance.get_associated(self.alias)
        if items is None:
            items = []
            instance.set_associated(self.alias, items)
        return items

    def get(self, instance: ORMModel) -> List[ORMModel]:
        return list(self._items(instance))

    def count(self, instance: ORMModel) -> int:
        return len(self._items(instance))

    def has(self, instance: ORMModel, targets: Union[ORMModel, Iterable[ORMModel]]) -> bool:
        """True when every given target is associated with ``instance``."""
        items = self._items(instance)
        return all(target in items for target in self._to_list(targets))

    def add(self, instance: ORMModel, targets: Union[ORMModel, Iterable[ORMModel]]) -> None:
        items = self._items(instance)
        key_value = getattr(instance, self.source_key, None)
        for target in self._to_list(targets):
            self._check_instance(target)
            setattr(target, self.foreign_key, key_value)
            target.set_associated(self.inverse.alias, instance)
            if target not in items:
                items.append(target)

    def remove(self, instance: ORMModel, targets: Union[ORMModel, Iterable[ORMModel]]) -> None:
        items = self._items(instance)
        for target in self._to_list(targets):
            if target not in items:
                continue
            items.remove(target)
            setattr(target, self.foreign_key, None)
            target.clear_associated(self.inverse.alias)

    def set(self, instance: ORMModel, targets: Union[ORMModel, Iterable[ORMModel], None]) -> None:
        """Replace the associated targets; targets no longer present get their foreign key cleared."""
        new_targets = self._to_list(targets)
        stale = [item for item in self._items(instance) if item not in new_targets]
        self.remove(instance, stale)
        self.add(instance, new_targets)

    def create(self, instance: ORMModel, **values: Any) -> ORMModel:
        target = self.target(**{**values, self.foreign_key: getattr(instance, self.source_key, None)})
        self.add(instance, target)
        return target
