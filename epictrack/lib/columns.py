"""Fixed-width column formatting for epic and story tables."""

ELLIPSIS = "..."


def get_column_string(text: str, width: int) -> str:
    """Fit text into exactly `width` characters.

    Short text is right-padded with spaces. Long text is cut and ends in
    '...'; widths below 4 leave room for dots only.
    """
    if len(text) > width:
        if width <= len(ELLIPSIS):
            return "." * width
        return text[:width - len(ELLIPSIS)] + ELLIPSIS
    return text.ljust(width)


def format_row(values: list[str], widths: list[int], sep: str = " | ") -> str:
    """Join values into one table row, one fixed-width column each."""
    return sep.join(get_column_string(v, w) for v, w in zip(values, widths))
