"""Activity sinks receiving ledger events."""

from tenancy_ledger.sinks.console import ConsoleSink
from tenancy_ledger.sinks.json_file import JsonFileSink
from tenancy_ledger.sinks.kafka import KafkaSink, ProducerStats

__all__ = ["ConsoleSink", "JsonFileSink", "KafkaSink", "ProducerStats", "build_sink"]


def build_sink(kind: str, config):
    """Return the sink named by ``kind`` ("none", "console", "json" or "kafka")."""
    from tenancy_ledger.exceptions import ConfigurationError

    if kind == "none":
        return None
    if kind == "console":
        return ConsoleSink(pretty=config.output.pretty_json)
    if kind == "json":
        return JsonFileSink(config.output.json_output_dir, topic_prefix=config.kafka.topic_prefix)
    if kind == "kafka":
        return KafkaSink(config.kafka)
    raise ConfigurationError(f"Unknown sink {kind!r}")
