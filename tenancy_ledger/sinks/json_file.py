"""JSON Lines sink writing one file per topic."""

import logging
from pathlib import Path
from typing import TextIO

from tenancy_ledger.exceptions import SinkError
from tenancy_ledger.models import Event
from tenancy_ledger.sinks.serialization import event_to_json, topic_for

logger = logging.getLogger(__name__)


class JsonFileSink:
    """Append events to ``<topic>.jsonl`` files."""

    def __init__(self, output_dir: str | Path, topic_prefix: str = "ledger") -> None:
        """Initialize JSON file sink.

        Parameters
        ----------
        output_dir : str | Path
            Directory to write JSON Lines files.
        topic_prefix : str
            Prefix for topic names (and therefore file names).
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.topic_prefix = topic_prefix
        self._files: dict[str, TextIO] = {}
        self._counts: dict[str, int] = {}

    def path_for(self, topic: str) -> Path:
        # Use topic name as filename (replace dots with underscores)
        return self.output_dir / (topic.replace(".", "_") + ".jsonl")

    def publish(self, event: Event) -> None:
        topic = topic_for(event, self.topic_prefix)
        try:
            handle = self._files.get(topic)
            if handle is None:
                handle = open(self.path_for(topic), "a", encoding="utf-8")
                self._files[topic] = handle
            handle.write(event_to_json(event) + "\n")
            handle.flush()
        except OSError as e:
            raise SinkError(f"Failed to write {event.event_type} to {topic}: {e}") from e
        self._counts[topic] = self._counts.get(topic, 0) + 1

    def close(self) -> None:
        """Close open files and log a summary."""
        for handle in self._files.values():
            handle.close()
        self._files.clear()
        for topic, count in self._counts.items():
            logger.info("Wrote %d events to %s", count, self.path_for(topic))
