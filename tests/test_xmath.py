from ottercache.xmath import (
    MAX_INT64,
    absolute,
    round_up_power_of_2,
    round_up_power_of_2_64,
    saturated_add,
)


def test_absolute():
    assert absolute(1) == 1
    assert absolute(-1) == 1


def test_round_up_power_of_2():
    assert round_up_power_of_2(0) == 1
    assert round_up_power_of_2(3) == 4
    assert round_up_power_of_2(4) == 4


def test_round_up_power_of_2_64():
    assert round_up_power_of_2_64(0) == 1
    assert round_up_power_of_2_64(3) == 4
    assert round_up_power_of_2_64(4) == 4


def test_round_up_power_of_2_64_is_power_and_not_smaller():
    for value in range(1, 5000, 7):
        result = round_up_power_of_2_64(value)
        assert result >= value
        assert result & (result - 1) == 0
        assert result // 2 < value


def test_saturated_add():
    assert saturated_add(1, 2) == 3
    assert saturated_add(MAX_INT64 - 300_000, 1_000_000) == MAX_INT64