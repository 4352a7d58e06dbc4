from __future__ import annotations

from .models import AverageMetrics


def format_number(value: float, precision: int = 1, decimal_separator: str = ".") -> str:
    if precision < 0:
        raise ValueError(f"precision must be zero or more, got {precision}")
    text = f"{value:.{precision}f}"
    if decimal_separator != ".":
        text = text.replace(".", decimal_separator)
    return text


def format_averages_line(
    name: str,
    averages: AverageMetrics,
    precision: int = 1,
    decimal_separator: str = ".",
) -> str:
    """
    One terse report line: ``NAME turnaround response wait``.
    """
    values = (averages.turnaround, averages.response, averages.wait)
    return " ".join([name] + [format_number(v, precision, decimal_separator) for v in values])
