# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest

from ghgcalc.notifier import ChangeNotifier


def test_first_publish_always_notifies():
    seen = []
    notifier = ChangeNotifier(seen.append)
    assert notifier.last_value is None
    assert notifier.publish(0.0) is True
    assert seen == [0.0]


def test_same_total_notifies_once():
    seen = []
    notifier = ChangeNotifier(seen.append)
    for _ in range(5):
        notifier.publish(210.0)
    notifier.publish(211.0)
    notifier.publish(211.0)
    assert seen == [210.0, 211.0]
    assert notifier.last_value == 211.0


def test_tolerance():
    seen = []
    notifier = ChangeNotifier(seen.append, tolerance=0.01)
    notifier.publish(1.0)
    assert notifier.publish(1.005) is False
    assert notifier.publish(1.02) is True
    assert seen == [1.0, 1.02]


def test_negative_tolerance_rejected():
    with pytest.raises(ValueError):
        ChangeNotifier(tolerance=-1.0)


def test_multiple_subscribers_and_unsubscribe():
    first, second = [], []
    notifier = ChangeNotifier(first.append)
    notifier.subscribe(second.append)
    notifier.publish(1.0)
    notifier.unsubscribe(first.append)
    notifier.publish(2.0)
    assert first == [1.0]
    assert second == [1.0, 2.0]


def test_subscriber_error_propagates_without_resend():
    calls = []

    def failing(total):
        calls.append(total)
        raise RuntimeError("boom")

    notifier = ChangeNotifier(failing)
    with pytest.raises(RuntimeError):
        notifier.publish(5.0)
    assert notifier.last_value == 5.0
    assert notifier.publish(5.0) is False
    assert calls == [5.0]


def test_failing_subscriber_does_not_starve_others():
    received = []

    def failing(total):
        raise ValueError(f"cannot store {total}")

    def also_failing(total):
        raise KeyError("second")

    notifier = ChangeNotifier(failing)
    notifier.subscribe(also_failing)
    notifier.subscribe(received.append)
    with pytest.raises(ValueError, match="cannot store 7.5"):
        notifier.publish(7.5)
    assert received == [7.5]
    assert notifier.last_value == 7.5


def test_reset():
    seen = []
    notifier = ChangeNotifier(seen.append)
    notifier.publish(3.0)
    notifier.reset()
    notifier.publish(3.0)
    assert seen == [3.0, 3.0]
