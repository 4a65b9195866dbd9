# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Tests for the association construction pipeline.
"""

from __future__ import annotations

import warnings

import pytest
from pydantic import BaseModel

from assocalchemy import (
    Association,
    AssociationOptions,
    BelongsTo,
    HookEvent,
    InvalidTargetError,
    ModelNotDefinedError,
    ModelRegistry,
    ORMModel,
    define_association,
    model_field,
)


class TestPipelinePreconditions:
    """Steps 1 and 2: target validity and definition state."""

    def test_non_model_target(self, post_model):
        with pytest.raises(InvalidTargetError, match="Post.belongs_to called with something that's not a subclass of ORMModel: 42") as exc_info:
            post_model.belongs_to(42)

        assert isinstance(exc_info.value, TypeError)
        assert exc_info.value.code == "INVALID_TARGET"

    def test_plain_pydantic_model_target(self, post_model):
        class Plain(BaseModel):
            id: int

        with pytest.raises(InvalidTargetError, match="Post.has_many called"):
            post_model.has_many(Plain)

    def test_target_instance_is_not_a_model_class(self, user_post):
        User, Post = user_post

        with pytest.raises(InvalidTargetError):
            Post.belongs_to(User(id=1))

    def test_undefined_source(self, user_model):
        class Draft(ORMModel):
            id: int = model_field(primary_key=True)

        with pytest.raises(ModelNotDefinedError, match="Model Draft must be defined"):
            Draft.belongs_to(user_model)

    def test_undefined_target(self, post_model):
        class Draft(ORMModel):
            id: int = model_field(primary_key=True)

        with pytest.raises(ModelNotDefinedError, match="Model Draft must be defined"):
            post_model.belongs_to(Draft)

    def test_unresolved_model_name(self, post_model):
        with pytest.raises(ModelNotDefinedError, match="Model Ghost is not defined in the registry yet"):
            post_model.belongs_to("Ghost")

    def test_non_model_target_with_untyped_association_class(self, post_model):
        with pytest.raises(InvalidTargetError, match="Post.association called with something"):
            define_association(Association, post_model, 42, {}, lambda opts: None)

    def test_direct_instantiation_is_rejected(self, user_post):
        User, Post = user_post

        with pytest.raises(TypeError, match="cannot be instantiated directly"):
            BelongsTo(object(), Post, User, AssociationOptions())


class TestPipelineOptions:
    """Step 3: option normalization."""

    def test_options_are_detached_from_caller(self, user_post):
        User, Post = user_post
        captured = []
        original = AssociationOptions(alias="author", scope={"active": True})

        define_association(BelongsTo, Post, User, original, lambda opts: captured.append(opts) or opts)

        options = captured[0]
        assert options is not original
        options.scope["active"] = False
        assert original.scope == {"active": True}

    def test_hooks_flag_is_coerced_to_bool(self, user_post):
        User, Post = user_post
        captured = []

        define_association(BelongsTo, Post, User, None, captured.append)

        assert captured[0].hooks is False

    def test_deprecated_registry_accessor(self, registry: ModelRegistry, user_post):
        User, Post = user_post
        association = Post.belongs_to(User)

        with pytest.warns(DeprecationWarning, match="options.registry"):
            assert association.options.registry is registry

    def test_deprecation_warning_can_be_disabled(self):
        registry = ModelRegistry({"deprecation_warnings": False})

        @registry.register()
        class User(ORMModel):
            id: int = model_field(primary_key=True)

        @registry.register()
        class Post(ORMModel):
            id: int = model_field(primary_key=True)

        association = Post.belongs_to(User)

        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert association.options.registry is registry

    def test_declared_alias_is_written_back(self, user_post):
        User, Post = user_post
        association = Post.belongs_to(User)

        assert association.options.alias == "user"
        assert association.is_aliased is False


class TestPipelineHooks:
    """Steps 4 to 6: hook ordering around the build step."""

    def test_hook_order(self, registry: ModelRegistry, user_post):
        User, Post = user_post
        events = []
        result = object()

        def before(payload, options):
            events.append("before")
            assert payload["source"] is Post
            assert payload["target"] is User
            assert payload["association_class"] is BelongsTo
            assert payload["registry"] is registry
            assert "association" not in payload

        def after(payload, options):
            events.append("after")
            assert payload["association"] is result

        def build(options):
            events.append("build")
            return result

        Post.add_hook(HookEvent.BEFORE_ASSOCIATE, before)
        Post.add_hook(HookEvent.AFTER_ASSOCIATE, after)

        returned = define_association(BelongsTo, Post, User, {"hooks": True}, build)

        assert returned is result
        assert events == ["before", "build", "after"]

    @pytest.mark.parametrize("options", [None, {"hooks": False}, {"hooks": None}])
    def test_hooks_do_not_run_unless_requested(self, user_post, options):
        User, Post = user_post
        events = []
        Post.add_hook(HookEvent.BEFORE_ASSOCIATE, lambda *args: events.append("before"))
        Post.add_hook(HookEvent.AFTER_ASSOCIATE, lambda *args: events.append("after"))

        define_association(BelongsTo, Post, User, options, lambda opts: None)

        assert events == []

    def test_hooks_receive_normalized_options(self, user_post):
        User, Post = user_post
        seen = []
        Post.add_hook(HookEvent.BEFORE_ASSOCIATE, lambda payload, options: seen.append(options))

        association = Post.belongs_to(User, hooks=True, alias="author")

        assert seen[0] is association.options
        assert seen[0].hooks is True

    def test_no_rollback_after_failing_after_hook(self, user_post):
        User, Post = user_post

        def fail(payload, options):
            raise RuntimeError("after hook failed")

        Post.add_hook(HookEvent.AFTER_ASSOCIATE, fail)

        with pytest.raises(RuntimeError, match="after hook failed"):
            Post.belongs_to(User, hooks=True)

        assert Post.has_association("user")
        assert "user_id" in Post.get_attributes()

    def test_failing_before_hook_prevents_build(self, user_post):
        User, Post = user_post

        def veto(payload, options):
            raise ValueError("not allowed")

        Post.add_hook(HookEvent.BEFORE_ASSOCIATE, veto)

        with pytest.raises(ValueError, match="not allowed"):
            Post.belongs_to(User, hooks=True)

        assert not Post.has_association("user")
