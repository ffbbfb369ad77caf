"""
Append-only writers for the execution log and the summary report.

Both files are plain text. Each run truncates them and writes a header
line, then every write reopens the file in append mode so whatever was
written survives an abrupt exit.
"""

from pathlib import Path
from typing import Iterable, Union

from secproto.logging_config import get_logger
from secproto.models import ExecutionResult

logger = get_logger(__name__)

LOG_HEADER = "Security Protocol Execution Log"
REPORT_HEADER = "Security Protocol Execution Report"


class AppendOnlyFile:
    """A text file that is truncated once per run and appended to afterwards."""

    header: str = ""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def start(self) -> None:
        """Create or truncate the file and write the header line."""
        if self.path.parent != Path("."):
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{self.header}\n", encoding="utf-8")
        logger.debug(f"Started {self.path}")

    def append(self, text: str) -> None:
        """Append raw text to the file."""
        with self.path.open("a", encoding="utf-8") as f:
            f.write(text)


class ExecutionLog(AppendOnlyFile):
    """Raw execution trace: command text, output and timing."""

    header = LOG_HEADER


class ExecutionReport(AppendOnlyFile):
    """Summary report with one line per tool that ran."""

    header = REPORT_HEADER

    def append_result(self, result: ExecutionResult) -> None:
        """Append the report line for a single result."""
        self.append(f"{result.report_line()}\n")

    def write_summary(self, results: Iterable[ExecutionResult]) -> None:
        """Append one line per result, in invocation order."""
        for result in results:
            self.append_result(result)
