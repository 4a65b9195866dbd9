# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the identity and collision guards.
"""

from __future__ import annotations

import pytest

from assocalchemy import (
    AssocAlchemyError,
    AssociationError,
    AssociationOptions,
    ModelNotDefinedError,
    NamingCollisionError,
    ORMModel,
    assert_association_model_is_defined,
    assert_association_unique,
    check_naming_collision,
    model_field,
)


class TestNamingCollision:
    """Alias versus attribute collisions."""

    def test_alias_equal_to_attribute(self, user_model):
        with pytest.raises(NamingCollisionError) as exc_info:
            check_naming_collision(user_model, "name")

        error = exc_info.value
        assert isinstance(error, ValueError)
        assert isinstance(error, AssocAlchemyError)
        assert error.code == "NAMING_COLLISION"
        assert error.alias == "name"
        assert error.model_name == "User"
        assert "Naming collision between attribute 'name' and association 'name' on model User" in str(error)

    def test_free_alias_passes(self, user_model):
        check_naming_collision(user_model, "author")

    def test_declaration_with_colliding_alias_leaves_model_untouched(self, user_post):
        User, Post = user_post
        attributes_before = dict(Post.get_attributes())

        with pytest.raises(NamingCollisionError, match="change the 'alias' option"):
            Post.belongs_to(User, alias="title")

        assert Post.get_attributes() == attributes_before
        assert "title_id" not in Post.get_attributes()
        assert not Post.has_association("title")

    def test_synthesized_foreign_key_counts_as_attribute(self, user_post):
        User, Post = user_post
        Post.belongs_to(User)

        with pytest.raises(NamingCollisionError):
            Post.belongs_to(User, alias="user_id")


class TestAssociationUniqueness:
    """Alias versus association collisions."""

    def test_duplicate_user_declaration(self, user_post):
        User, Post = user_post
        Post.belongs_to(User)

        with pytest.raises(AssociationError, match='two associations with the same name "user" on the model "Post"') as exc_info:
            Post.belongs_to(User)

        assert exc_info.value.implicit is False
        assert exc_info.value.code == "ASSOCIATION_CONFLICT"

    def test_duplicate_alias_different_kind(self, user_post):
        User, Post = user_post
        User.has_one(Post, alias="entry")

        with pytest.raises(AssociationError, match="two associations with the same name"):
            User.has_many(Post, alias="entry")

    def test_declaration_after_implicit_inverse(self, user_post):
        """The inverse created by has_many is named as the origin of the conflict."""
        User, Post = user_post
        User.has_many(Post)

        with pytest.raises(AssociationError, match=r"already created by User\.has_many\(Post\)") as exc_info:
            Post.belongs_to(User)

        assert exc_info.value.implicit is True
        assert exc_info.value.alias == "user"

    def test_unused_alias_passes(self, user_post):
        User, Post = user_post
        Post.belongs_to(User)

        assert_association_unique(Post, AssociationOptions(alias="editor"))

    def test_distinct_aliases_to_same_target(self, user_post):
        User, Post = user_post
        author = Post.belongs_to(User, alias="author")
        editor = Post.belongs_to(User, alias="editor")

        assert Post.associations == {"author": author, "editor": editor}
        assert {"author_id", "editor_id"} <= set(Post.get_attributes())


class TestModelDefinedGuard:
    """Models must be defined before declaring associations."""

    def test_defined_model_passes(self, user_model):
        assert_association_model_is_defined(user_model)

    def test_undefined_model(self):
        class Draft(ORMModel):
            id: int = model_field(primary_key=True)

        with pytest.raises(ModelNotDefinedError, match="Model Draft must be defined") as exc_info:
            assert_association_model_is_defined(Draft)

        assert exc_info.value.code == "MODEL_NOT_DEFINED"
        assert exc_info.value.model_name == "Draft"
