r"""Single-use callback slot.

The caller callback of a logical request must be invoked exactly once,
whichever terminal event comes first. ``CallbackSlot`` is the token the
orchestration consumes to deliver that outcome.
"""

from __future__ import annotations

__all__ = ["CallbackSlot"]

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class CallbackSlot:
    """Deliver at most one outcome to a callback.

    Args:
        callback: The caller callback. ``None`` means the outcome is
            dropped, which still consumes the slot.

    Example:
        ```pycon
        >>> from jsonrequest.utils.callbacks import CallbackSlot
        >>> slot = CallbackSlot(print)
        >>> slot.fire(None, {"some": "payload"})
        None {'some': 'payload'}
        True
        >>> slot.fire(None, "late")
        False
        >>> slot.fired
        True

        ```
    """

    def __init__(self, callback: Callable[..., Any] | None) -> None:
        self._callback = callback
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def fire(self, *args: Any) -> bool:
        """Invoke the callback unless the slot was already consumed.

        Args:
            *args: The arguments passed to the callback.

        Returns:
            ``True`` if the callback was invoked by this call, ``False``
            if an outcome had already been delivered.
        """
        if self._fired:
            logger.debug("Dropping late outcome, the callback already fired")
            return False
        self._fired = True
        callback, self._callback = self._callback, None
        if callback is not None:
            callback(*args)
        return True

