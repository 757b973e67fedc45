"""JSON export of titles and audit events, one file per entity type."""

import logging
from pathlib import Path
from typing import Any

from debt_manager.exceptions import SinkError
from debt_manager.sinks.serialization import dumps, to_dict

logger = logging.getLogger(__name__)


class JsonFileSink:
    """Write each batch as a JSON array to ``<output_dir>/<entity_type>.json``.

    A second batch of the same entity type replaces the file.
    """

    def __init__(self, output_dir: str | Path, pretty: bool = False) -> None:
        """Create the sink and its output directory.

        Raises
        ------
        SinkError
            If the directory cannot be created.
        """
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SinkError(f"Cannot create output directory {self.output_dir}: {exc}") from exc
        self.pretty = pretty
        self._written: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> Path:
        """Serialize ``records`` and write them out.

        Returns
        -------
        Path
            The file written.

        Raises
        ------
        SinkError
            On any I/O failure.
        """
        file_path = self.output_dir / f"{entity_type}.json"
        payload = dumps([to_dict(record) for record in records], pretty=self.pretty)

        try:
            with open(file_path, "w", encoding="utf-8") as f:
                f.write(payload)
        except OSError as exc:
            raise SinkError(f"Failed to write {file_path}: {exc}") from exc

        self._written[entity_type] = len(records)
        logger.info("Wrote %d %s records to %s", len(records), entity_type, file_path)
        return file_path

    def close(self) -> None:
        """Print where the files went."""
        print(f"JSON files written to: {self.output_dir}")
        for entity_type, count in self._written.items():
            print(f"  {entity_type}: {count} records")
