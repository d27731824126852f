# xtrace_shiviz/utils/shiviz_writer.py
# This file is part of xtrace-shiviz - X-Trace to ShiViz conversion
#
# Writer for ShiViz-compatible log files

from pathlib import Path
from typing import Iterable, Union

from xtrace_shiviz.exceptions import LogWriteError
from xtrace_shiviz.model.record import LogRecord
from xtrace_shiviz.utils.logger import get_logger

#: Parsing hint ShiViz expects on the first line: host, clock, event.
SHIVIZ_REGEX = r"(?<host>\S*) (?<clock>{.*})\n(?<event>.*)"
SHIVIZ_HEADER = SHIVIZ_REGEX + "\n\n"


def format_record(record: LogRecord) -> str:
    """Render one record as its two ShiViz lines."""
    return record.to_shiviz()


def write_shiviz_log(records: Iterable[LogRecord], filepath: Union[str, Path]) -> int:
    """Create (or overwrite) a ShiViz log and stream `records` into it.

    Records are written as they are consumed; if a write fails part way
    through, the lines already written stay on disk.

    Args:
        records: Records in causal order
        filepath: Destination path

    Returns:
        Number of records written

    Raises:
        LogWriteError: If the file cannot be created or written
    """
    logger = get_logger()
    path = Path(filepath)
    count = 0

    try:
        with open(path, "w", encoding="utf-8", newline="\n") as file:
            file.write(SHIVIZ_HEADER)
            for record in records:
                file.write(format_record(record))
                count += 1
    except OSError as e:
        raise LogWriteError(f"Cannot write ShiViz log {path}: {e}")

    logger.debug(f"Wrote {count} record(s) to {path}")
    return count
