from ledger.functional import Either, Left, Right, partition_results, pipe


def test_either_map():
    right_value = Right(5)
    doubled = right_value.map(lambda x: x * 2)

    assert doubled.is_right()
    assert doubled.get_or_else(0) == 10

    left_value = Left("error")
    mapped_left = left_value.map(lambda x: x * 2)
    assert mapped_left.is_left()
    assert mapped_left.get_or_else(0) == 0
    assert mapped_left.get_error() == "error"


def test_either_bind_stops_at_first_error():
    def halve(x: int) -> Either[str, int]:
        if x % 2:
            return Left(f"{x} is odd")
        return Right(x // 2)

    assert Right(8).bind(halve).bind(halve) == Right(2)
    assert Right(6).bind(halve).bind(halve) == Left("3 is odd")
    assert Left("original error").bind(halve) == Left("original error")


def test_partition_results_keeps_order():
    values, errors = partition_results([Right(1), Left("x"), Right(2), Left("y")])
    assert values == [1, 2]
    assert errors == ["x", "y"]


def test_pipe():
    def add1(x):
        return x + 1

    def mul2(x):
        return x * 2

    assert pipe(3, add1, mul2) == 8
