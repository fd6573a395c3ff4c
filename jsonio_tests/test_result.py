import pytest

from jsonio.utils.result import Err, Ok, OkErr, UnwrapError, as_result, is_err, is_ok


def test_ok() -> None:
    result = Ok(3)
    assert result.is_ok() and not result.is_err()
    assert is_ok(result) and not is_err(result)
    assert result.ok() == 3
    assert result.err() is None
    assert result.unwrap() == 3
    assert result.expect('never') == 3
    assert result.unwrap_or(0) == 3
    assert result.unwrap_or_else(len) == 3
    assert result.unwrap_or_raise() == 3
    assert result.map(lambda x: x * 2) == Ok(6)
    assert result.map_err(str) == Ok(3)
    assert result.and_then(lambda x: Err(x)) == Err(3)
    assert isinstance(result, OkErr)
    with pytest.raises(UnwrapError):
        result.unwrap_err()


def test_err() -> None:
    error = ValueError('bad')
    result = Err(error)
    assert result.is_err() and not result.is_ok()
    assert result.ok() is None
    assert result.err() is error
    assert result.unwrap_err() is error
    assert result.unwrap_or(0) == 0
    assert result.unwrap_or_else(str) == 'bad'
    assert result.map(lambda x: x * 2) is result
    assert result.map_err(str) == Err('bad')
    assert result.and_then(Ok) is result
    with pytest.raises(UnwrapError) as exc_info:
        result.unwrap()
    assert exc_info.value.result is result
    assert exc_info.value.__cause__ is error
    with pytest.raises(UnwrapError, match='context'):
        result.expect('context')
    with pytest.raises(ValueError):
        result.unwrap_or_raise()


def test_equality_and_hash() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)
    assert hash(Ok(1)) != hash(Err(1))
    assert len({Ok(1), Ok(1), Err(2)}) == 2


def test_as_result() -> None:
    @as_result(ValueError)
    def parse(text: str) -> int:
        return int(text)

    assert parse('12') == Ok(12)
    assert isinstance(parse('x').unwrap_err(), ValueError)

    with pytest.raises(TypeError):
        as_result()
    with pytest.raises(TypeError):
        as_result(int)  # type: ignore[arg-type]
