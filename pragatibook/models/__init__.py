from pragatibook.constants import CURRENCY_SYMBOL


def format_amount(value: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Format an amount with two decimals and thousands separators: 1234.5 -> '₹1,234.50'."""
    if value < 0:
        return f"-{symbol}{-value:,.2f}"
    return f"{symbol}{value:,.2f}"
