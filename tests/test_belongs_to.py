# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
End-to-end tests for belongs_to declarations and their accessors.
"""

from __future__ import annotations

import pytest

from assocalchemy import (
    AssociationType,
    BelongsTo,
    DataType,
    ForeignKeyReference,
    ModelRegistry,
    ORMModel,
    model_field,
)


class TestBelongsToDeclaration:
    """Metadata produced by Post.belongs_to(User)."""

    def test_end_to_end(self, user_post):
        User, Post = user_post

        association = Post.belongs_to(User, foreign_key_constraint=True)

        assert isinstance(association, BelongsTo)
        assert association.association_type is AssociationType.BELONGS_TO
        assert Post.associations["user"] is association
        assert Post.get_association("user") is association
        assert association.accessors["get"] == "get_user"
        assert association.accessors["set"] == "set_user"
        assert association.accessors["create"] == "create_user"

        user_id = Post.get_attributes()["user_id"]
        assert user_id.references == ForeignKeyReference(model="Users", key="id")
        assert user_id.data_type == DataType.INT64
        assert association.foreign_key == "user_id"
        assert association.target_key == "id"
        assert association.identifier_field == "user_id"

    def test_association_identity(self, user_post):
        User, Post = user_post
        association = Post.belongs_to(User)

        assert association.source is Post
        assert association.target is User
        assert association.root_association is association
        assert association.parent_association is None
        assert association.is_self_association is False
        assert association.name.singular == "user"
        assert association.name.plural == "users"

    def test_custom_alias_and_keys(self, registry: ModelRegistry, user_post):
        User, Post = user_post

        association = Post.belongs_to(User, alias="author", foreign_key="written_by")

        assert association.alias == "author"
        assert association.is_aliased is True
        assert association.foreign_key == "written_by"
        assert "written_by" in Post.get_attributes()
        assert association.accessors["get"] == "get_author"

    def test_custom_target_key(self, registry: ModelRegistry, post_model):
        @registry.register()
        class Account(ORMModel):
            id: int = model_field(primary_key=True)
            handle: str = model_field(unique=True)

        association = post_model.belongs_to(Account, target_key="handle", foreign_key_constraint=True)

        assert association.foreign_key == "account_handle"
        account_handle = post_model.get_attributes()["account_handle"]
        assert account_handle.data_type == DataType.STRING
        assert account_handle.references == ForeignKeyReference(model="Accounts", key="handle")

    def test_unknown_target_key(self, user_post):
        User, Post = user_post

        with pytest.raises(ValueError, match="Attribute 'email' not found on model User"):
            Post.belongs_to(User, target_key="email")

    def test_target_without_primary_key(self, registry: ModelRegistry, post_model):
        @registry.register()
        class Setting(ORMModel):
            value: str = model_field(default="")

        with pytest.raises(ValueError, match="Model Setting has no primary key"):
            post_model.belongs_to(Setting)

    def test_multi_word_model_name(self, registry: ModelRegistry, post_model):
        @registry.register()
        class BlogAuthor(ORMModel):
            id: int = model_field(primary_key=True)

        association = post_model.belongs_to(BlogAuthor)

        assert association.alias == "blog_author"
        assert association.foreign_key == "blog_author_id"
        assert association.accessors["get"] == "get_blog_author"

    def test_self_association(self, registry: ModelRegistry):
        @registry.register()
        class Category(ORMModel):
            id: int = model_field(primary_key=True)

        association = Category.belongs_to(Category, alias="parent")

        assert association.is_self_association is True
        assert association.foreign_key == "parent_id"


class TestBelongsToAccessors:
    """In-memory accessor behavior."""

    def test_get_set(self, user_post):
        User, Post = user_post
        Post.belongs_to(User)
        user = User(id=7, name="Ada")
        post = Post(id=1)

        assert post.get_user() is None

        post.set_user(user)
        assert post.user_id == 7
        assert post.get_user() is user

        post.set_user(None)
        assert post.user_id is None
        assert post.get_user() is None

    def test_create(self, user_post):
        User, Post = user_post
        Post.belongs_to(User)
        post = Post(id=1)

        user = post.create_user(id=3, name="Grace")

        assert isinstance(user, User)
        assert user.name == "Grace"
        assert post.user_id == 3
        assert post.get_user() is user

    def test_set_rejects_wrong_instance(self, user_post):
        User, Post = user_post
        Post.belongs_to(User)

        with pytest.raises(TypeError, match="Association 'user' expects instances of User, got Post"):
            Post(id=1).set_user(Post(id=2))

    def test_accessor_forwards_to_association(self, user_post, monkeypatch):
        User, Post = user_post
        association = Post.belongs_to(User)
        calls = []
        monkeypatch.setattr(association, "get", lambda instance: calls.append(instance) or "forwarded")

        post = Post(id=1)

        assert post.get_user() == "forwarded"
        assert calls == [post]

    def test_instances_have_independent_caches(self, user_post):
        User, Post = user_post
        Post.belongs_to(User)
        first, second = Post(id=1), Post(id=2)

        first.set_user(User(id=1))

        assert second.get_user() is None
