"""Human-readable unit formatting shared by prompts and CLI tables."""

_SIZE_UNITS = ("B", "KB", "MB", "GB", "TB")


def format_bytes(size_bytes: int) -> str:
    """Format a byte count using 1024-based units.

    One decimal place is kept and a trailing ".0" is dropped, so 1536
    renders as "1.5 KB" and 2097152 as "2 MB".

    Args:
        size_bytes: Size in bytes.

    Returns:
        Human-readable size string.
    """
    if size_bytes <= 0:
        return "0 B"

    last = len(_SIZE_UNITS) - 1
    exponent = 0
    while exponent < last and size_bytes >= 1024 ** (exponent + 1):
        exponent += 1

    value = round(size_bytes / 1024**exponent, 1)
    if value >= 1024 and exponent < last:
        value = round(value / 1024, 1)
        exponent += 1

    text = f"{value:.1f}".removesuffix(".0")
    return f"{text} {_SIZE_UNITS[exponent]}"
