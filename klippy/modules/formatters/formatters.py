#========= ANSI colours used when rendering build commands for a terminal

GREEN = "\033[32m"
RED = "\033[31m"
WHITE = "\033[37m"
RESET = "\033[0m"


def colorize(text: str, code: str) -> str:
    """Wrap text in an ANSI colour code and reset afterwards."""
    return f"{code}{text}{RESET}"


#========= FORMATTER
def format_history_date(iso_date: str) -> str:
    """Convert ISO date to MM-DD-YYYY format.

    Args:
        iso_date: ISO 8601 date string like '2018-01-27T04:14:00.804659581Z'

    Returns:
        Formatted date string like '01-27-2018'
    """
    if not iso_date:
        return ""
    date_part = iso_date.split("T")[0]
    parts = date_part.split("-")
    if len(parts) == 3:
        return f"{parts[1]}-{parts[2]}-{parts[0]}"
    return iso_date

