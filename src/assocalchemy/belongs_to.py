# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
One-to-one association where the source model holds the foreign key.
"""

from __future__ import annotations

from typing import Any, ClassVar, Optional, Tuple

from .associations import Association
from .constants import AccessorConstants, AssociationType
from .helpers import add_foreign_key_constraints, remove_undefined
from .orm import FieldMetadata, ORMModel


class BelongsTo(Association):
    """
    ``Source.belongs_to(Target)``: ``Source`` gets a ``<alias>_<target key>`` attribute.

    :class: BelongsTo
    :synopsis: Owning side of a one-to-one or many-to-one relationship
    """

    association_type: ClassVar[AssociationType] = AssociationType.BELONGS_TO
    is_single_association: ClassVar[bool] = True
    accessor_methods: ClassVar[Tuple[str, ...]] = (
        AccessorConstants.GET,
        AccessorConstants.SET,
        AccessorConstants.CREATE,
    )

    target_key: str
    foreign_key: str

    def _setup(self) -> None:
        # @@ STEP 1: Resolve key names
        self.target_key = self.options.target_key or self._first_primary_key(self.target)
        self._require_attribute(self.target, self.target_key)
        self.foreign_key = self.options.foreign_key or self._key_name(self.alias, self.target_key)

        # @@ STEP 2: Guard before any metadata is touched
        self._guard()

        # @@ STEP 3: Synthesize the foreign key attribute on the source
        target_key_meta = self.target.get_attributes()[self.target_key]
        new_attribute = FieldMetadata(
            **remove_undefined(
                {
                    "data_type": target_key_meta.data_type,
                    "allow_null": True,
                }
            )
        )
        add_foreign_key_constraints(
            new_attribute, self.target, self.options, target_key_meta.column_name(self.target_key)
        )
        self.source.merge_attributes_default({self.foreign_key: new_attribute})

        # @@ STEP 4: Register and expose
        self._register()
        self._install_accessors()

    @property
    def identifier_field(self) -> str:
        """Storage column of the foreign key."""
        return self.source.get_attributes()[self.foreign_key].column_name(self.foreign_key)

    # ---- accessor implementations -----------------------------------------

    def get(self, instance: ORMModel) -> Optional[ORMModel]:
        """The associated target instance, or None when nothing is associated."""
        return instance.get_associated(self.alias)

    def set(self, instance: ORMModel, associated: Optional[ORMModel]) -> None:
        """
        Associate ``instance`` with ``associated`` by copying its key into the foreign key.

        Passing None clears the foreign key.
        """
        if associated is None:
            setattr(instance, self.foreign_key, None)
            instance.clear_associated(self.alias)
            return
        self._check_instance(associated)
        setattr(instance, self.foreign_key, getattr(associated, self.target_key, None))
        instance.set_associated(self.alias, associated)

    def create(self, instance: ORMModel, **values: Any) -> ORMModel:
        """Build a new target instance and associate it."""
        associated = self.target(**values)
        self.set(instance, associated)
        return associated
