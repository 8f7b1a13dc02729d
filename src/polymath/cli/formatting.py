"""Display formatting for dashboard figures."""

from polymath.domain.entities import Entry, extras_to_dict


def format_currency(amount: float) -> str:
    """Whole-dollar currency, e.g. $1,235 or -$40."""
    sign = "-" if round(amount) < 0 else ""
    return f"{sign}${abs(amount):,.0f}"


def format_percent(value: float) -> str:
    return f"{value:.1f}%"


def format_number(value: float) -> str:
    """Integers without decimals, other numbers as given."""
    if float(value).is_integer():
        return f"{value:,.0f}"
    return f"{value:,}"


def entry_lines(entry: Entry) -> list[str]:
    """Labelled lines describing an entry."""
    lines = [
        f"  Date:       {entry.date.isoformat()}",
        f"  Revenue:    {format_currency(entry.revenue)}",
        f"  Salaries:   {format_currency(entry.salaries)}",
        f"  Expenses:   {format_currency(entry.expenses)}",
        f"  Net profit: {format_currency(entry.net_profit)}",
    ]
    for name, value in extras_to_dict(entry.extras).items():
        shown = value if isinstance(value, str) else format_number(value)
        lines.append(f"  {name.capitalize() + ':':<11} {shown}")
    if entry.notes:
        lines.append(f"  Notes:      {entry.notes}")
    return lines
