import threading

import pytest

from ottercache.adder import Adder


def test_adder_add():
    a = Adder()
    for i in range(100):
        assert a.value() == i * 42
        a.add(42)


def test_adder_wraps_at_64_bits():
    a = Adder()
    a.add(2**64 - 1)
    a.add(2)
    assert a.value() == 1


@pytest.mark.parametrize("modifiers", [4, 16, 64])
def test_adder_parallel_increments(modifiers):
    a = Adder()
    incs = 10_000

    def work():
        for _ in range(incs):
            a.add(1)

    threads = [threading.Thread(target=work) for _ in range(modifiers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert a.value() == modifiers * incs