# core/formatters.py

# all pure text utilities
# must never import from models!

# === generic text formatters ===


def format_banner_text(title: str, width: int = 40) -> str:
    line = "=" * width
    centered_title = f"{title:^{width}}"

    return f"{line}\n{centered_title}\n{line}"


def format_grade(grade: float | None) -> str:
    return f"{grade:.2f}" if grade is not None else "[NO GRADE]"


def format_list_with_and(items: list[str]) -> str:
    if not items:
        return ""

    if len(items) == 1:
        return items[0]

    if len(items) == 2:
        return " and ".join(items)

    return ", ".join(items[:-1]) + ", and " + items[-1]
