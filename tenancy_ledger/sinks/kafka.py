"""Kafka sink streaming ledger events to per-entity topics."""

import logging
import time
from dataclasses import dataclass
from typing import Any

from confluent_kafka import KafkaException, Producer

from tenancy_ledger.config import KafkaConfig
from tenancy_ledger.exceptions import SinkError
from tenancy_ledger.models import Event
from tenancy_ledger.sinks.serialization import event_to_json, topic_for

logger = logging.getLogger(__name__)


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    start_time: float | None = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0

    @property
    def pending(self) -> int:
        return self.sent - self.delivered - self.failed


class KafkaSink:
    """Publish events to Kafka, keyed by landlord so each landlord's feed stays ordered."""

    def __init__(self, config: KafkaConfig | str) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.producer = Producer(config.to_dict())
        self.stats = ProducerStats(start_time=time.time())

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    @staticmethod
    def _get_key(event: Event) -> str:
        return event.metadata.get("landlord_id") or event.subject

    def publish(self, event: Event) -> None:
        """Queue one event; delivery is reported through the callback."""
        topic = topic_for(event, self.config.topic_prefix)
        key = self._get_key(event)
        try:
            self.producer.produce(
                topic=topic,
                key=key.encode("utf-8") if key else None,
                value=event_to_json(event).encode("utf-8"),
                callback=self._delivery_callback,
            )
        except (BufferError, KafkaException) as e:
            raise SinkError(f"Failed to produce {event.event_type} to {topic}: {e}") from e
        self.stats.sent += 1
        self.producer.poll(0)

    def flush(self, timeout: float = 30.0) -> int:
        """Flush pending messages; returns how many are still queued."""
        return self.producer.flush(timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        remaining = self.flush()
        if remaining:
            logger.warning("Kafka sink closed with %d undelivered events", remaining)
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
