"""Tests for event sinks."""

import json
import logging
import tempfile
from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from confluent_kafka import KafkaException

from tenancy_ledger.config import KafkaConfig, LedgerConfig, OutputConfig
from tenancy_ledger.exceptions import ConfigurationError, SinkError
from tenancy_ledger.models import Event
from tenancy_ledger.sinks import ConsoleSink, JsonFileSink, KafkaSink, ProducerStats, build_sink
from tenancy_ledger.sinks.serialization import event_to_dict, event_to_json, topic_for


def make_event(event_type: str = "payment.recorded", landlord_id: str | None = "ll-001") -> Event:
    return Event(
        event_id="e1",
        event_type=event_type,
        event_time=datetime(2024, 5, 3, 10, 30),
        source="tenancy-ledger",
        subject="p1",
        data={"amount": "5000", "note": "মে মাসের ভাড়া"},
        metadata={"landlord_id": landlord_id, "user_id": "ll-001"},
    )


class TestSerialization:
    def test_event_to_dict(self) -> None:
        doc = event_to_dict(make_event())

        assert doc["event_time"] == "2024-05-03T10:30:00"
        assert doc["data"]["amount"] == "5000"
        assert doc["metadata"]["landlord_id"] == "ll-001"

    def test_event_to_json_keeps_unicode(self) -> None:
        text = event_to_json(make_event())

        assert "মে মাসের ভাড়া" in text
        assert "\n" not in text
        assert "\n" in event_to_json(make_event(), pretty=True)

    @pytest.mark.parametrize(
        "event_type,prefix,expected",
        [
            ("tenant.assigned", "ledger", "ledger.tenant"),
            ("payment.recorded", "rent", "rent.payment"),
            ("notice.status_changed", "", "notice"),
        ],
    )
    def test_topic_for(self, event_type: str, prefix: str, expected: str) -> None:
        assert topic_for(make_event(event_type), prefix) == expected


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_init_default(self) -> None:
        sink = ConsoleSink()

        assert sink.pretty is True
        assert sink.counts == {}

    def test_publish(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=False)

        sink.publish(make_event())
        sink.publish(make_event("tenant.assigned"))
        sink.publish(make_event())
        captured = capsys.readouterr()

        assert json.loads(captured.out.splitlines()[0])["event_type"] == "payment.recorded"
        assert sink.counts == {"payment.recorded": 2, "tenant.assigned": 1}

    def test_close_prints_summary(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=False)
        sink.publish(make_event())
        capsys.readouterr()

        sink.close()
        captured = capsys.readouterr()

        assert "Console Sink Summary" in captured.out
        assert "payment.recorded: 1 events" in captured.out

    def test_close_silent_when_empty(self, capsys: pytest.CaptureFixture) -> None:
        ConsoleSink().close()

        assert capsys.readouterr().out == ""


class TestJsonFileSink:
    """Tests for JsonFileSink."""

    def test_init_creates_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            output_dir = Path(tmpdir) / "events"

            JsonFileSink(output_dir)

            assert output_dir.is_dir()

    def test_one_file_per_topic(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = JsonFileSink(tmpdir, topic_prefix="ledger")

            sink.publish(make_event())
            sink.publish(make_event())
            sink.publish(make_event("tenant.assigned"))
            sink.close()

            payments = (Path(tmpdir) / "ledger_payment.jsonl").read_text(encoding="utf-8").splitlines()
            tenants = (Path(tmpdir) / "ledger_tenant.jsonl").read_text(encoding="utf-8").splitlines()
            assert len(payments) == 2
            assert len(tenants) == 1
            assert json.loads(tenants[0])["event_type"] == "tenant.assigned"

    def test_appends_across_instances(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            for _ in range(2):
                sink = JsonFileSink(tmpdir)
                sink.publish(make_event())
                sink.close()

            lines = (Path(tmpdir) / "ledger_payment.jsonl").read_text(encoding="utf-8").splitlines()
            assert len(lines) == 2

    def test_write_failure_raises_sink_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            sink = JsonFileSink(tmpdir)

            with patch("builtins.open", side_effect=PermissionError("read-only")):
                with pytest.raises(SinkError, match="ledger.payment"):
                    sink.publish(make_event())


class TestProducerStats:
    def test_success_rate(self) -> None:
        stats = ProducerStats(sent=100, delivered=90, failed=10)

        assert stats.success_rate == 0.9
        assert stats.pending == 0
        assert ProducerStats().success_rate == 0.0

    def test_pending(self) -> None:
        assert ProducerStats(sent=10, delivered=6, failed=1).pending == 3


class TestKafkaSinkMocked:
    """Tests for KafkaSink using mocks (no actual Kafka connection)."""

    @patch("tenancy_ledger.sinks.kafka.Producer")
    def test_init_with_string(self, mock_producer_class: MagicMock) -> None:
        sink = KafkaSink("kafka:9092")

        assert sink.config.bootstrap_servers == "kafka:9092"
        assert mock_producer_class.call_args[0][0]["bootstrap.servers"] == "kafka:9092"

    @patch("tenancy_ledger.sinks.kafka.Producer")
    def test_publish_keys_by_landlord(self, mock_producer_class: MagicMock) -> None:
        mock_producer = mock_producer_class.return_value
        sink = KafkaSink(KafkaConfig(topic_prefix="rent"))

        sink.publish(make_event())

        kwargs = mock_producer.produce.call_args[1]
        assert kwargs["topic"] == "rent.payment"
        assert kwargs["key"] == b"ll-001"
        assert json.loads(kwargs["value"].decode("utf-8"))["subject"] == "p1"
        mock_producer.poll.assert_called_once_with(0)
        assert sink.stats.sent == 1

    @patch("tenancy_ledger.sinks.kafka.Producer")
    def test_publish_falls_back_to_subject_key(self, mock_producer_class: MagicMock) -> None:
        sink = KafkaSink("localhost:9092")

        sink.publish(make_event(landlord_id=None))

        assert mock_producer_class.return_value.produce.call_args[1]["key"] == b"p1"

    @pytest.mark.parametrize("error", [BufferError("queue full"), KafkaException("broker down")])
    @patch("tenancy_ledger.sinks.kafka.Producer")
    def test_publish_failure(self, mock_producer_class: MagicMock, error: Exception) -> None:
        mock_producer_class.return_value.produce.side_effect = error
        sink = KafkaSink("localhost:9092")

        with pytest.raises(SinkError):
            sink.publish(make_event())

        assert sink.stats.sent == 0

    @patch("tenancy_ledger.sinks.kafka.Producer")
    def test_delivery_callback(self, mock_producer_class: MagicMock) -> None:
        sink = KafkaSink("localhost:9092")
        mock_msg = MagicMock()
        mock_msg.topic.return_value = "ledger.payment"
        mock_msg.partition.return_value = 0
        mock_msg.offset.return_value = 1

        sink._delivery_callback(None, mock_msg)
        sink._delivery_callback("Connection error", None)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    @patch("tenancy_ledger.sinks.kafka.Producer")
    def test_flush(self, mock_producer_class: MagicMock) -> None:
        mock_producer_class.return_value.flush.return_value = 0
        sink = KafkaSink("localhost:9092")

        assert sink.flush(timeout=10.0) == 0
        mock_producer_class.return_value.flush.assert_called_once_with(10.0)

    @patch("tenancy_ledger.sinks.kafka.Producer")
    def test_close_warns_on_undelivered(self, mock_producer_class: MagicMock, caplog: pytest.LogCaptureFixture) -> None:
        mock_producer_class.return_value.flush.return_value = 3
        sink = KafkaSink("localhost:9092")

        with caplog.at_level(logging.WARNING):
            sink.close()

        assert "3 undelivered events" in caplog.text


class TestBuildSink:
    def test_none(self) -> None:
        assert build_sink("none", LedgerConfig()) is None

    def test_console(self) -> None:
        config = LedgerConfig(output=OutputConfig(pretty_json=True))

        sink = build_sink("console", config)

        assert isinstance(sink, ConsoleSink)
        assert sink.pretty is True

    def test_json(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = LedgerConfig(output=OutputConfig(json_output_dir=Path(tmpdir)))

            sink = build_sink("json", config)

            assert isinstance(sink, JsonFileSink)
            assert sink.output_dir == Path(tmpdir)

    @patch("tenancy_ledger.sinks.kafka.Producer")
    def test_kafka(self, mock_producer_class: MagicMock) -> None:
        assert isinstance(build_sink("kafka", LedgerConfig()), KafkaSink)

    def test_unknown(self) -> None:
        with pytest.raises(ConfigurationError):
            build_sink("smoke-signals", LedgerConfig())
