import pytest

from coflow.metaresult import MetaResult, convert


def test_single_value_unwraps():
    result = MetaResult(False, 1)
    assert result.unwrap() == 1


def test_iterable_collects_in_order():
    result = MetaResult(True)
    result.append(1)
    result.append(2)
    assert list(result) == [1, 2]


def test_iterable_starts_from_given_data():
    result = MetaResult(iterable=True, data=(5, 6))
    result.append(7)
    assert list(result) == [5, 6, 7]


def test_iterable_cannot_unwrap():
    with pytest.raises(TypeError):
        MetaResult(True).unwrap()


def test_single_value_is_not_iterable():
    with pytest.raises(TypeError):
        iter(MetaResult(False, 3))


def test_single_value_cannot_append():
    with pytest.raises(TypeError):
        MetaResult(False, 3).append(4)


def test_convert_int_to_char():
    assert convert(42, str) == "*"


def test_convert_char_round_trip():
    assert convert(convert(42, str), int) == 42


def test_convert_float_truncates_to_int():
    assert convert(99.12, int) == 99


def test_convert_unwraps_meta_result():
    assert convert(MetaResult(False, 3), float) == 3.0


def test_convert_rejects_long_string_to_int():
    with pytest.raises(ValueError):
        convert("ab", int)