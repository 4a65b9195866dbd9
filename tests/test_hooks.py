# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Tests for per-model hook storage and dispatch.
"""

import logging

import pytest

from assocalchemy import HookCollection, HookEvent, ModelRegistry, ORMModel, model_field


class TestHookCollection:
    """Registration, removal and synchronous dispatch."""

    def setup_method(self):
        self.hooks = HookCollection()

    def test_hooks_run_in_registration_order(self):
        calls = []
        self.hooks.add(HookEvent.BEFORE_ASSOCIATE, lambda *args: calls.append(("first", args)))
        self.hooks.add("before_associate", lambda *args: calls.append(("second", args)))

        self.hooks.run("before_associate", 1, 2)

        assert calls == [("first", (1, 2)), ("second", (1, 2))]

    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError, match="Unknown hook event 'before_save'"):
            self.hooks.add("before_save", lambda *args: None)

    def test_non_callable_rejected(self):
        with pytest.raises(ValueError, match="must be callable"):
            self.hooks.add(HookEvent.AFTER_ASSOCIATE, "not a function")

    def test_remove_and_has(self):
        def hook(*args):
            return None

        assert not self.hooks.has(HookEvent.AFTER_ASSOCIATE)
        self.hooks.add(HookEvent.AFTER_ASSOCIATE, hook)
        assert self.hooks.has(HookEvent.AFTER_ASSOCIATE)

        assert self.hooks.remove(HookEvent.AFTER_ASSOCIATE, hook) is True
        assert self.hooks.remove(HookEvent.AFTER_ASSOCIATE, hook) is False
        assert not self.hooks.has(HookEvent.AFTER_ASSOCIATE)

    def test_exception_stops_remaining_hooks(self):
        calls = []

        def failing(*args):
            raise RuntimeError("hook failed")

        self.hooks.add(HookEvent.BEFORE_ASSOCIATE, failing)
        self.hooks.add(HookEvent.BEFORE_ASSOCIATE, lambda *args: calls.append(args))

        with pytest.raises(RuntimeError, match="hook failed"):
            self.hooks.run(HookEvent.BEFORE_ASSOCIATE)
        assert calls == []

    def test_hook_can_remove_itself_while_running(self):
        calls = []

        def once(*args):
            calls.append(args)
            self.hooks.remove(HookEvent.BEFORE_ASSOCIATE, once)

        self.hooks.add(HookEvent.BEFORE_ASSOCIATE, once)
        self.hooks.run(HookEvent.BEFORE_ASSOCIATE)
        self.hooks.run(HookEvent.BEFORE_ASSOCIATE)

        assert calls == [()]

    def test_coroutine_result_is_closed_with_warning(self, caplog):
        async def async_hook(*args):
            return None

        self.hooks.add(HookEvent.AFTER_ASSOCIATE, async_hook)
        with caplog.at_level(logging.WARNING, logger="assocalchemy.hooks"):
            self.hooks.run(HookEvent.AFTER_ASSOCIATE)

        assert "returned a coroutine" in caplog.text


class TestModelHooks:
    """Hooks stored on model classes."""

    def test_define_hooks_wrap_registration(self, registry: ModelRegistry):
        class Tag(ORMModel):
            id: int = model_field(primary_key=True)

        seen = []
        Tag.add_hook(HookEvent.BEFORE_DEFINE, lambda model: seen.append(("before", model.is_defined())))
        Tag.add_hook(HookEvent.AFTER_DEFINE, lambda model: seen.append(("after", model.is_defined())))

        registry.define(Tag)

        assert seen == [("before", False), ("after", True)]

    def test_hooks_are_per_class(self):
        class Base(ORMModel):
            id: int = model_field(primary_key=True)

        class Child(Base):
            pass

        Base.add_hook(HookEvent.BEFORE_ASSOCIATE, lambda *args: None)

        assert Base.has_hook(HookEvent.BEFORE_ASSOCIATE)
        assert not Child.has_hook(HookEvent.BEFORE_ASSOCIATE)
