from __future__ import annotations

from unittest.mock import Mock

import pytest

from jsonrequest.utils.callbacks import CallbackSlot

###################################
#     Tests for CallbackSlot     #
###################################


def test_callback_slot_fires_once() -> None:
    callback = Mock()
    slot = CallbackSlot(callback)

    assert slot.fire(None, {"some": "payload"}, "response")
    assert not slot.fire(ValueError("late"), None, None)

    callback.assert_called_once_with(None, {"some": "payload"}, "response")
    assert slot.fired


def test_callback_slot_not_fired_initially() -> None:
    assert not CallbackSlot(Mock()).fired


def test_callback_slot_without_callback_is_consumed() -> None:
    slot = CallbackSlot(None)
    assert slot.fire("error")
    assert slot.fired
    assert not slot.fire("error")


def test_callback_slot_consumed_even_if_callback_raises() -> None:
    callback = Mock(side_effect=RuntimeError("boom"))
    slot = CallbackSlot(callback)
    with pytest.raises(RuntimeError, match=r"boom"):
        slot.fire(None)
    assert slot.fired
    assert not slot.fire(None)
    callback.assert_called_once()
