"""证券代码区间测试"""

import pytest

from mdpack.core.exceptions import ConfigError
from mdpack.core.services import CodeRange, CodeRangeFilter


class TestCodeRange:
    def test_parse_range(self):
        assert CodeRange.parse("000001-000100") == CodeRange(1, 100)

    def test_parse_single_code(self):
        assert CodeRange.parse(" 600000 ") == CodeRange(600000, 600000)

    @pytest.mark.parametrize("text", ["abc", "000100-000001", "1-", ""])
    def test_invalid(self, text):
        with pytest.raises(ConfigError):
            CodeRange.parse(text)

    def test_contains(self):
        code_range = CodeRange(1, 100)
        assert "000001" in code_range
        assert "000100" in code_range
        assert "000101" not in code_range
        assert "SH0001" not in code_range


def test_filter_accepts_any_range():
    code_filter = CodeRangeFilter.from_strings(["000001-000100", "600000"])
    assert code_filter("000050")
    assert code_filter("600000")
    assert not code_filter("600001")
    assert repr(code_filter) == "CodeRangeFilter([000001-000100, 600000-600000])"
