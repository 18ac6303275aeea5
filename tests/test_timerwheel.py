import time
from dataclasses import dataclass
from typing import Any

import pytest

from ottercache.timerwheel import SHIFT, SPANS, TimerWheel


@dataclass(eq=False)
class _Node:
    key: str
    expires_at: int
    prev_exp: Any = None
    next_exp: Any = None


def _exp(sec):
    return sec * 1_000_000_000


def _level_of(wheel, node):
    for level in range(5):
        for bucket in wheel.bucket_nodes(level):
            if any(n is node for n in bucket):
                return level
    return None


@pytest.mark.parametrize(
    "expires_at, level",
    [
        ((1 << 36) - 1, 0),
        (1 << 36, 1),
        ((1 << 42) - 1, 1),
        (1 << 42, 2),
        (1 << 47, 3),
        (1 << 49, 4),
    ],
)
def test_bucket_level_boundaries(expires_at, level):
    assert SPANS[1] == 1 << 36
    assert SHIFT == (30, 36, 42, 47, 49)
    wheel = TimerWheel(0)
    node = _Node("edge", expires_at)
    wheel.add(node)
    assert _level_of(wheel, node) == level


def test_add():
    nodes = [
        _Node("k1", _exp(1)),
        _Node("k2", _exp(69)),
        _Node("k3", _exp(4399)),
    ]
    wheel = TimerWheel()
    for n in nodes:
        wheel.add(n)

    assert _level_of(wheel, nodes[0]) == 0
    assert _level_of(wheel, nodes[1]) == 1
    assert _level_of(wheel, nodes[2]) == 2


def test_delete_expired():
    now = time.time_ns()
    nodes = [
        _Node("k1", now + _exp(1)),
        _Node("k2", now + _exp(10)),
        _Node("k3", now + _exp(30)),
        _Node("k4", now + _exp(120)),
        _Node("k5", now + _exp(6500)),
        _Node("k6", now + _exp(142000)),
        _Node("k7", now + _exp(1420000)),
    ]
    expired = []
    wheel = TimerWheel(now)
    for n in nodes:
        wheel.add(n)

    def expire(n, now_nanos):
        expired.append(n)

    keys = []
    steps = [
        (2, ["k1"]),
        (64, ["k2", "k3"]),
        (121, ["k4"]),
        (12000, ["k5"]),
        (350000, ["k6"]),
        (1520000, ["k7"]),
    ]
    for seconds, new_keys in steps:
        wheel.delete_expired(now + _exp(seconds), expire)
        keys.extend(new_keys)
        assert [n.key for n in expired] == keys


def test_expire_callback_receives_current_time():
    wheel = TimerWheel(0)
    node = _Node("a", _exp(1))
    wheel.add(node)
    seen = []
    wheel.delete_expired(_exp(3), lambda n, t: seen.append((n.key, t)))
    assert seen == [("a", _exp(3))]
    assert node.prev_exp is None and node.next_exp is None


def test_delete_unschedules():
    wheel = TimerWheel(0)
    keep = _Node("keep", _exp(1))
    drop = _Node("drop", _exp(1))
    wheel.add(keep)
    wheel.add(drop)
    wheel.delete(drop)
    assert drop.next_exp is None
    assert _level_of(wheel, drop) is None

    expired = []
    wheel.delete_expired(_exp(5), lambda n, t: expired.append(n.key))
    assert expired == ["keep"]


@pytest.mark.parametrize("seconds", [0, 1, 30])
def test_not_due_nodes_stay_scheduled(seconds):
    wheel = TimerWheel(0)
    node = _Node("late", _exp(1000))
    wheel.add(node)
    expired = []
    wheel.delete_expired(_exp(seconds), lambda n, t: expired.append(n))
    assert expired == []
    assert _level_of(wheel, node) is not None