# utils.py

def format_currency(amount: int) -> str:
  """Cents to en-US dollars, e.g. 123456 -> "$1,234.56"."""
  dollars = amount / 100
  sign = "-" if dollars < 0 else ""
  return f"{sign}${abs(dollars):,.2f}"
