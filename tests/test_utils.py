import pytest

from utils import format_currency


@pytest.mark.parametrize("amount, expected", [
  (123456, "$1,234.56"),
  (0, "$0.00"),
  (5, "$0.05"),
  (12000, "$120.00"),
  (-500, "-$5.00"),
])
def test_format_currency(amount, expected):
  assert format_currency(amount) == expected
