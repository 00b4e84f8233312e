"""Tests for console and Kafka sinks."""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest

from property_registry.exceptions import SinkError
from property_registry.models import Event, Listing, ListingType
from property_registry.sinks.console import ConsoleSink


def _listing() -> Listing:
    return Listing(
        property_id=7,
        listing_type=ListingType.SALE,
        price=300000,
        rental_period=None,
        listed_at=datetime(2024, 3, 1, tzinfo=timezone.utc),
    )


def _event() -> Event:
    return Event(
        event_id="evt-1",
        event_type="listing.upserted",
        event_time=datetime(2024, 3, 1, tzinfo=timezone.utc),
        source="property-registry",
        subject="7",
        data={"price": 300000},
    )


class TestConsoleSink:
    """Tests for ConsoleSink."""

    def test_init_default(self) -> None:
        sink = ConsoleSink()

        assert sink.pretty is True
        assert sink.max_records is None
        assert sink._counts == {}

    def test_write_batch_dataclass(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=False)

        sink.write_batch("listings", [_listing()])
        captured = capsys.readouterr()

        assert "listings" in captured.out
        assert '"listing_type": "Sale"' in captured.out
        assert sink._counts["listings"] == 1

    def test_write_batch_with_max_records(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=False, max_records=2)

        sink.write_batch("rows", [{"id": i} for i in range(5)])
        captured = capsys.readouterr()

        assert "... and 3 more records" in captured.out
        assert sink._counts["rows"] == 5

    def test_send_event(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink(pretty=False)

        sink.send("dev.registry.listings", _event(), key="7")
        captured = capsys.readouterr()

        assert captured.out.startswith("[dev.registry.listings 7]")
        assert '"event_type": "listing.upserted"' in captured.out
        assert sink._counts["dev.registry.listings"] == 1

    def test_close(self, capsys: pytest.CaptureFixture) -> None:
        sink = ConsoleSink()
        sink._counts = {"listings": 3}

        sink.close()
        captured = capsys.readouterr()

        assert "listings: 3 records" in captured.out


class TestKafkaSinkMocked:
    """Tests for KafkaSink with a mocked producer."""

    def test_producer_stats_success_rate(self) -> None:
        from property_registry.sinks.kafka import ProducerStats

        assert ProducerStats().success_rate == 0.0
        assert ProducerStats(delivered=3, failed=1).success_rate == 0.75

    @patch("property_registry.sinks.kafka.Producer")
    def test_init_with_string(self, mock_producer_class: MagicMock) -> None:
        from property_registry.sinks.kafka import KafkaSink

        sink = KafkaSink("kafka:9092")

        assert sink.config.bootstrap_servers == "kafka:9092"
        config_dict = mock_producer_class.call_args[0][0]
        assert config_dict["bootstrap.servers"] == "kafka:9092"

    @patch("property_registry.sinks.kafka.Producer")
    def test_send_event_as_json(self, mock_producer_class: MagicMock) -> None:
        from property_registry.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.send("dev.registry.listings", _event(), key="7")

        call_kwargs = mock_producer.produce.call_args[1]
        assert call_kwargs["topic"] == "dev.registry.listings"
        assert call_kwargs["key"] == b"7"
        payload = json.loads(call_kwargs["value"])
        assert payload["event_type"] == "listing.upserted"
        assert payload["event_time"] == "2024-03-01T00:00:00+00:00"
        assert sink.stats.sent == 1

    @patch("property_registry.sinks.kafka.Producer")
    def test_send_without_key(self, mock_producer_class: MagicMock) -> None:
        from property_registry.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")
        sink.send("topic", {"id": 1})

        assert mock_producer.produce.call_args[1]["key"] is None

    @patch("property_registry.sinks.kafka.Producer")
    def test_full_queue_raises_sink_error(self, mock_producer_class: MagicMock) -> None:
        from property_registry.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer.produce.side_effect = BufferError("Local: Queue full")
        mock_producer_class.return_value = mock_producer

        sink = KafkaSink("localhost:9092")

        with pytest.raises(SinkError, match="Queue full"):
            sink.send("topic", {"id": 1})
        assert sink.stats.sent == 0

    @patch("property_registry.sinks.kafka.Producer")
    def test_delivery_callback(self, mock_producer_class: MagicMock) -> None:
        from property_registry.sinks.kafka import KafkaSink

        sink = KafkaSink("localhost:9092")
        mock_msg = MagicMock()
        mock_msg.topic.return_value = "topic"
        mock_msg.partition.return_value = 0
        mock_msg.offset.return_value = 1

        sink._delivery_callback(None, mock_msg)
        sink._delivery_callback("boom", mock_msg)

        assert sink.stats.delivered == 1
        assert sink.stats.failed == 1

    @patch("property_registry.sinks.kafka.Producer")
    def test_close_flushes(self, mock_producer_class: MagicMock) -> None:
        from property_registry.sinks.kafka import KafkaSink

        mock_producer = MagicMock()
        mock_producer_class.return_value = mock_producer

        KafkaSink("localhost:9092").close()

        mock_producer.flush.assert_called_once_with(30.0)
