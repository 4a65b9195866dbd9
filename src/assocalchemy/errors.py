# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Exception hierarchy for AssocAlchemy.

Every declaration failure raises a subclass of :class:`AssocAlchemyError`. The
subclasses also derive from the builtin exception a caller would naturally
catch (``ValueError`` for conflicts, ``TypeError`` for a wrong target), so code
written against plain builtins keeps working.

:module: errors
:synopsis: Typed exceptions for association declaration failures
"""

from __future__ import annotations

from typing import Optional

from .constants import ErrorCodes


class AssocAlchemyError(Exception):
    """Base exception for all AssocAlchemy errors."""

    def __init__(self, message: str, code: str, model_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.model_name = model_name


class NamingCollisionError(AssocAlchemyError, ValueError):
    """Association alias collides with an attribute on the source model."""

    def __init__(self, message: str, model_name: Optional[str] = None, alias: Optional[str] = None) -> None:
        super().__init__(message, ErrorCodes.NAMING_COLLISION, model_name)
        self.alias = alias


class AssociationError(AssocAlchemyError, ValueError):
    """Association alias collides with an association already on the source model."""

    def __init__(
        self,
        message: str,
        model_name: Optional[str] = None,
        alias: Optional[str] = None,
        implicit: bool = False,
    ) -> None:
        super().__init__(message, ErrorCodes.ASSOCIATION_CONFLICT, model_name)
        self.alias = alias
        # True when the existing association was created as a side effect of another one
        self.implicit = implicit


class InvalidTargetError(AssocAlchemyError, TypeError):
    """The association target is not a model class."""

    def __init__(self, message: str, model_name: Optional[str] = None) -> None:
        super().__init__(message, ErrorCodes.INVALID_TARGET, model_name)


class ModelNotDefinedError(AssocAlchemyError, ValueError):
    """A model taking part in an association has not been defined in a registry."""

    def __init__(self, message: str, model_name: Optional[str] = None) -> None:
        super().__init__(message, ErrorCodes.MODEL_NOT_DEFINED, model_name)


__all__ = [
    "AssocAlchemyError",
    "NamingCollisionError",
    "AssociationError",
    "InvalidTargetError",
    "ModelNotDefinedError",
]
