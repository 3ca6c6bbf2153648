from dockrel.core.errors import ErrorCode


def test_values_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.RELEASE_FAILED) == 1
    assert int(ErrorCode.CONFIG_ERROR) == 2
