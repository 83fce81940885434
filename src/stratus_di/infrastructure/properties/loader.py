from pathlib import Path
from typing import Dict, Tuple, Union


def load_properties(path: Union[str, Path]) -> Dict[str, str]:
    """Read a ``.properties`` file.

    Raises:
        OSError: If the file cannot be read.
    """
    return parse_properties(Path(path).read_text(encoding="utf-8"))


def parse_properties(text: str) -> Dict[str, str]:
    """Parse ``key=value`` / ``key: value`` lines into a flat map.

    Lines starting with ``#`` or ``!`` are comments. A trailing backslash
    joins the next line onto the current value. Later keys override earlier ones.

    Example:
        >>> parse_properties("db.url = jdbc:x\\n# comment\\ndb.user: admin")
        {'db.url': 'jdbc:x', 'db.user': 'admin'}
    """
    entries: Dict[str, str] = {}
    pending = ""
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not pending and (not line or line[0] in "#!"):
            continue
        if line.endswith("\\"):
            pending += line[:-1]
            continue
        key, value = _split(pending + line)
        entries[key] = value
        pending = ""
    if pending:
        key, value = _split(pending)
        entries[key] = value
    return entries


def _split(line: str) -> Tuple[str, str]:
    separators = [index for index in (line.find("="), line.find(":")) if index >= 0]
    if not separators:
        return line.strip(), ""
    index = min(separators)
    return line[:index].strip(), line[index + 1 :].strip()
