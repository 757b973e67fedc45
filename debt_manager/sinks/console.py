"""Console sink used by the CLI to print accruals, previews and summaries."""

import sys
from typing import IO, Any

from debt_manager.sinks.serialization import dumps, to_dict

RULE = "=" * 60


class ConsoleSink:
    """Print records as JSON, one batch under a header per entity type.

    Parameters
    ----------
    pretty : bool
        Indent JSON output.
    max_records : int | None
        Maximum records shown per batch; the rest are only counted.
    stream : IO[str] | None
        Destination, stdout by default.
    """

    def __init__(
        self,
        pretty: bool = True,
        max_records: int | None = None,
        stream: IO[str] | None = None,
    ) -> None:
        self.pretty = pretty
        self.max_records = max_records
        self._stream = stream
        self._counts: dict[str, int] = {}

    def _print(self, text: str) -> None:
        print(text, file=self._stream or sys.stdout)

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        self._print(f"\n{RULE}\nEntity: {entity_type} ({len(records)} records)\n{RULE}")

        shown = records if self.max_records is None else records[: self.max_records]
        for record in shown:
            self.write_record(record)
        hidden = len(records) - len(shown)
        if hidden:
            self._print(f"... and {hidden} more records")

        self._counts[entity_type] = self._counts.get(entity_type, 0) + len(records)

    def write_record(self, record: Any) -> None:
        self._print(dumps(to_dict(record), pretty=self.pretty))

    def close(self) -> None:
        """Print how many records of each type went out."""
        self._print(f"\n{RULE}\nConsole Sink Summary\n{RULE}")
        for entity_type, count in self._counts.items():
            self._print(f"  {entity_type}: {count} records")
