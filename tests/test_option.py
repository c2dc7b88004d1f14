import pytest
from ferrocore import NOTHING, Option, Some, UnwrapError


class TestOption:
    """Test the Option present/absent value"""

    def test_some_and_nothing(self):
        assert Some(3).is_some()
        assert not Some(3).is_none()
        assert NOTHING.is_none()
        assert Option.nothing() is NOTHING
        assert Option.some(3) == Some(3)

    def test_some_none_is_present(self):
        """Some(None) is a value, not an absence"""
        opt = Some(None)
        assert opt.is_some()
        assert opt != NOTHING

    def test_from_optional(self):
        assert Option.from_optional(0) == Some(0)
        assert Option.from_optional(None) is NOTHING

    def test_unwrap(self):
        assert Some("v").unwrap() == "v"
        with pytest.raises(UnwrapError, match="NOTHING"):
            NOTHING.unwrap()

    def test_unwrap_error_is_value_error(self):
        with pytest.raises(ValueError):
            NOTHING.unwrap()

    def test_unwrap_or(self):
        assert Some(1).unwrap_or(5) == 1
        assert NOTHING.unwrap_or(5) == 5
        assert NOTHING.unwrap_or_else(lambda: "lazy") == "lazy"

    def test_map_flat_map_filter(self):
        assert Some(2).map(lambda x: x + 1) == Some(3)
        assert NOTHING.map(lambda x: x + 1) is NOTHING
        assert Some(2).flat_map(lambda x: Some(x * 10)) == Some(20)
        assert Some(2).flat_map(lambda x: NOTHING) is NOTHING
        assert Some(4).filter(lambda x: x > 3) == Some(4)
        assert Some(2).filter(lambda x: x > 3) is NOTHING

    def test_or_else(self):
        assert Some(1).or_else(Some(2)) == Some(1)
        assert NOTHING.or_else(Some(2)) == Some(2)

    def test_if_some_and_match(self):
        seen = []
        Some("x").if_some(seen.append)
        NOTHING.if_some(seen.append)
        assert seen == ["x"]

        assert Some(2).match(lambda v: v * 2, lambda: -1) == 4
        assert NOTHING.match(lambda v: v * 2, lambda: -1) == -1

    def test_from_throwable(self):
        safe_int = Option.from_throwable(int)
        assert safe_int("12") == Some(12)
        assert safe_int("twelve") is NOTHING

    def test_no_truth_value(self):
        """Options cannot be used as booleans"""
        with pytest.raises(TypeError):
            bool(Some(0))
        with pytest.raises(TypeError):
            if NOTHING:
                pass

    def test_iteration(self):
        assert list(Some(7)) == [7]
        assert list(NOTHING) == []

    def test_equality_and_hash(self):
        assert Some(1) == Some(1)
        assert Some(1) != Some(2)
        assert Some(1) != 1
        assert len({Some(1), Some(1), NOTHING}) == 2

    def test_repr(self):
        assert repr(Some("a")) == "Some('a')"
        assert repr(NOTHING) == "NOTHING"
