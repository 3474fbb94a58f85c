import dataclasses
import io
import typing as t

from rich import box
from rich.console import Console
from rich.table import Table

from mgcstatus.model import ReportRow
from mgcstatus.util.format import FlexibleFormatter

COLUMNS = [
    # header, row attribute, extended only
    ("CollectionName", "name", False),
    ("Objs", "objs", False),
    ("Chunks", "chunks", False),
    ("aveChunkSize(KB)", "ave_chunk_size_kb", False),
    ("AllDataSize(MB)", "all_data_size_mb", True),
    ("idealChunksPerShard", "ideal_chunks_per_shard", False),
    ("remainChunks", "remain_chunks", False),
    ("remainChunksSize(KB)", "remain_chunks_size_kb", False),
    ("Jumbos", "jumbo_chunks", False),
    ("Balancer", "balancer", False),
]


@dataclasses.dataclass
class ReportFormatter(FlexibleFormatter):
    """
    Render chunk status report rows as table, JSON, or YAML.
    """

    thing: t.List[ReportRow]
    extended: bool = False
    markdown: bool = False
    max_width: int = 10_000

    def to_dict(self) -> t.List[t.Dict[str, t.Any]]:
        return [row.to_dict() for row in self.thing]

    def to_json(self) -> str:
        return FlexibleFormatter(self.to_dict()).to_json()

    def to_yaml(self) -> str:
        return FlexibleFormatter(self.to_dict()).to_yaml()

    def to_table(self) -> str:
        """
        Render the table at its natural width. Markdown tables get blank top and
        bottom edges, those are dropped.
        """
        buffer = io.StringIO()
        console = Console(file=buffer, width=self.max_width, no_color=True, highlight=False)
        console.print(self.table())
        lines = [line.rstrip() for line in buffer.getvalue().splitlines()]
        return "\n".join(line for line in lines if line) + "\n"

    def table(self) -> Table:
        columns = [column for column in COLUMNS if self.extended or not column[2]]
        table = Table(box=box.MARKDOWN if self.markdown else box.ROUNDED)
        for header, _, _ in columns:
            if header == "CollectionName":
                table.add_column(header, justify="left", no_wrap=True, overflow="fold")
            else:
                table.add_column(header, justify="right", no_wrap=True)
        for row in self.thing:
            table.add_row(*[str(getattr(row, attribute)) for _, attribute, _ in columns])
        return table
