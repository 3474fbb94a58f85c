import dataclasses
from enum import Enum

from mgcstatus.util.format import OutputFormat


class ErrorPolicy(str, Enum):
    """What to do when analysing a single collection fails."""

    ABORT = "abort"
    SKIP = "skip"


@dataclasses.dataclass
class ReportOptions:
    """
    Manage options of a single report run.
    """

    database: str = "test"
    extended: bool = False
    markdown: bool = False
    output_format: OutputFormat = OutputFormat.TABLE
    on_error: ErrorPolicy = ErrorPolicy.ABORT
    legacy_arithmetic: bool = False
    max_workers: int = 8
    timeout: float = 10.0

    def __post_init__(self):
        self.output_format = OutputFormat(self.output_format)
        self.on_error = ErrorPolicy(self.on_error)
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")
        if self.timeout <= 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @property
    def timeout_ms(self) -> int:
        return int(self.timeout * 1000)
