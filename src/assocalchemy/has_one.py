# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
One-to-one association where the target model holds the foreign key.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional, Tuple

from .associations import Association
from .belongs_to import BelongsTo
from .constants import AccessorConstants, AssociationType
from .naming import singularize, to_snake_case
from .orm import ORMModel


class HasOne(Association):
    """
    ``Source.has_one(Target)``: ``Target`` gets a foreign key to ``Source``.

    The foreign key is owned by an inverse :class:`BelongsTo` on the target,
    created here unless a matching one already exists.
    """

    association_type: ClassVar[AssociationType] = AssociationType.HAS_ONE
    is_single_association: ClassVar[bool] = True
    accessor_methods: ClassVar[Tuple[str, ...]] = (
        AccessorConstants.GET,
        AccessorConstants.SET,
        AccessorConstants.CREATE,
    )

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

    def get(self, instance: ORMModel) -> Optional[ORMModel]:
        return instance.get_associated(self.alias)

    def set(self, instance: ORMModel, associated: Optional[ORMModel]) -> None:
        """Point ``associated`` at ``instance``, detaching the previously associated target."""
        previous = instance.get_associated(self.alias)
        if previous is not None and previous is not associated:
            setattr(previous, self.foreign_key, None)
            previous.clear_associated(self.inverse.alias)

        if associated is None:
            instance.clear_associated(self.alias)
            return

        self._check_instance(associated)
        setattr(associated, self.foreign_key, getattr(instance, self.source_key, None))
        associated.set_associated(self.inverse.alias, instance)
        instance.set_associated(self.alias, associated)

    def create(self, instance: ORMModel, **values: Any) -> ORMModel:
        associated = self.target(**{**values, self.foreign_key: getattr(instance, self.source_key, None)})
        self.set(instance, associated)
        return associated
