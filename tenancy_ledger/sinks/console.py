"""Console sink for debugging and development."""

from tenancy_ledger.models import Event
from tenancy_ledger.sinks.serialization import event_to_json


class ConsoleSink:
    """Output events to console (stdout) for debugging."""

    def __init__(self, pretty: bool = True) -> None:
        """Initialize console sink.

        Parameters
        ----------
        pretty : bool
            Pretty-print JSON output.
        """
        self.pretty = pretty
        self._counts: dict[str, int] = {}

    def publish(self, event: Event) -> None:
        """Print one event."""
        print(event_to_json(event, pretty=self.pretty))
        self._counts[event.event_type] = self._counts.get(event.event_type, 0) + 1

    @property
    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    def close(self) -> None:
        """Print summary and close."""
        if not self._counts:
            return
        print(f"\n{'='*60}")
        print("Console Sink Summary")
        print("=" * 60)
        for event_type, count in sorted(self._counts.items()):
            print(f"  {event_type}: {count} events")
