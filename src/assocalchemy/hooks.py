# SPDX-FileCopyrightText: 2025 FanaticPythoner
# SPDX-License-Identifier: Apache-2.0

"""
Per-model lifecycle hook storage.

Hooks are plain callables keyed by :class:`HookEvent`. They run synchronously,
in registration order; the first exception aborts the remaining hooks and
propagates to the caller.
"""

from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, List, Union

from .constants import ErrorMessages, HookEvent, LoggingConstants

logger = logging.getLogger(__name__)

HookFunction = Callable[..., Any]


class HookCollection:
    """
    Registry of hook callables for a single model class.

    :class: HookCollection
    :synopsis: Ordered, per-event hook storage with synchronous dispatch
    """

    def __init__(self) -> None:
        self._hooks: Dict[HookEvent, List[HookFunction]] = {}

    @staticmethod
    def _normalize_event(event: Union[HookEvent, str]) -> HookEvent:
        try:
            return HookEvent(event)
        except ValueError:
            raise ValueError(
                ErrorMessages.UNKNOWN_HOOK_EVENT.format(
                    event=event, valid=", ".join(e.value for e in HookEvent)
                )
            ) from None

    def add(self, event: Union[HookEvent, str], hook: HookFunction) -> None:
        """
        Register a hook for an event.

        :param event: Event name
        :type event: Union[HookEvent, str]
        :param hook: Callable invoked with the arguments given to :meth:`run`
        :type hook: Callable
        :raises ValueError: If the event is unknown or the hook is not callable
        """
        normalized = self._normalize_event(event)
        if not callable(hook):
            raise ValueError(ErrorMessages.HOOK_NOT_CALLABLE.format(event=normalized.value, value=hook))
        self._hooks.setdefault(normalized, []).append(hook)

    def remove(self, event: Union[HookEvent, str], hook: HookFunction) -> bool:
        """Remove a previously registered hook. Returns False when it was not registered."""
        hooks = self._hooks.get(self._normalize_event(event), [])
        if hook not in hooks:
            return False
        hooks.remove(hook)
        return True

    def has(self, event: Union[HookEvent, str]) -> bool:
        """Check whether at least one hook listens to the event."""
        return bool(self._hooks.get(self._normalize_event(event)))

    def run(self, event: Union[HookEvent, str], *args: Any) -> None:
        """
        Invoke every hook registered for the event.

        Return values are ignored. A hook returning a coroutine is not awaited:
        the coroutine is closed and a warning is logged.
        """
        normalized = self._normalize_event(event)
        # Copy so a hook can unregister itself while running
        for hook in list(self._hooks.get(normalized, [])):
            result = hook(*args)
            if inspect.iscoroutine(result):
                result.close()
                logger.warning(LoggingConstants.HOOK_RETURNED_COROUTINE, normalized.value)
