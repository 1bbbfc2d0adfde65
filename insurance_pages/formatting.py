from datetime import date, datetime


def format_currency(amount: float) -> str:
    """Format an amount as US dollars, e.g. ``$1,234.50`` or ``-$12.00``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_date(value: str | date) -> str:
    """Render an ISO date or datetime as ``MMM dd, yyyy``."""
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return value.strftime("%b %d, %Y")


def short_id(value: str) -> str:
    return value[:8]


def title_case(value: str) -> str:
    return value[:1].upper() + value[1:]
