"""
Append-only, key-partitioned event log with consumer groups.

This stands in for a Kafka-style broker. Publishers append JSON payloads to a
topic; each consumer group reads every record once per group from its own
committed offsets.

Design decisions:
- Records are partitioned by a stable hash of their key (crc32), so records
  with the same key keep their relative order
- Offsets are committed after each handler call, whether the handler
  succeeded or raised. There is no dead-letter queue and no redelivery of
  failed records
- Optional JSON-lines file backing so the log survives restarts and can be
  shared between a publishing process and a consuming process
- Thread-safe: publishers may run on request worker threads
"""

import json
import logging
import threading
import zlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from shared.errors import EventLogError
from shared.metrics import PipelineMetrics, default_metrics


@dataclass(frozen=True)
class LogRecord:
    """
    One record in the log.

    Attributes:
        topic: Topic the record was published to
        partition: Partition chosen from the key
        offset: Position within the partition, starting at 0
        key: Partitioning key (booking id for booking events)
        value: The JSON-encoded payload
        timestamp: When the record was appended
    """
    topic: str
    partition: int
    offset: int
    key: str
    value: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def json(self) -> Any:
        """Decode the payload."""
        return json.loads(self.value)

    def __str__(self) -> str:
        return f"LogRecord({self.topic}[{self.partition}]@{self.offset}, key={self.key})"


# Type alias for record handler functions
RecordHandler = Callable[[LogRecord], None]


class EventLog:
    """
    In-process event log implementing publish/consume.

    Example usage:
        log = EventLog(partitions=3)
        log.publish("booking-created", "b-1", {"booking_id": "b-1"})

        def handle(record):
            print(record.json())

        log.consume("booking-created", "notification-service", handle)
    """

    def __init__(
        self,
        partitions: int = 3,
        path: Optional[Path] = None,
        logger: Optional[logging.Logger] = None,
        metrics: Optional[PipelineMetrics] = None,
    ):
        """
        Args:
            partitions: Number of partitions per topic
            path: Optional JSON-lines file to persist records and offsets in
            logger: Logger to report on (defaults to the "event_log" logger)
            metrics: Where produced/consumed counts go (defaults to the process-wide metrics)
        """
        if partitions < 1:
            raise ValueError("partitions must be >= 1")
        self.partitions = partitions
        self.path = Path(path) if path else None
        self.logger = logger or logging.getLogger("event_log")
        self.metrics = metrics or default_metrics()

        # topic -> partition -> records
        self._records: dict[str, list[list[LogRecord]]] = {}
        # (group, topic, partition) -> next offset to read
        self._committed: dict[tuple[str, str, int], int] = {}
        self._lock = threading.RLock()

        if self.path and self.path.exists():
            self._load()

    # =========================================================================
    # Publishing
    # =========================================================================

    def partition_for(self, key: str) -> int:
        """Stable partition for a key."""
        return zlib.crc32(key.encode("utf-8")) % self.partitions

    def publish(self, topic: str, key: str, payload: Any) -> LogRecord:
        """
        Append a payload to a topic.

        Args:
            topic: Topic name
            key: Partitioning key
            payload: Anything json.dumps accepts

        Returns:
            The appended record

        Raises:
            EventLogError: If the payload cannot be encoded or persisted
        """
        try:
            value = json.dumps(payload)
        except (TypeError, ValueError) as e:
            raise EventLogError(f"failed to encode payload for {topic}: {e}") from e

        with self._lock:
            partition = self.partition_for(key)
            partition_records = self._partitions(topic)[partition]
            record = LogRecord(
                topic=topic,
                partition=partition,
                offset=len(partition_records),
                key=key,
                value=value,
            )
            self._persist({"type": "record", **self._record_to_dict(record)})
            partition_records.append(record)

        self.metrics.record_event_produced(topic)
        self.logger.info(f"Published {record}")
        return record

    # =========================================================================
    # Consuming
    # =========================================================================

    def consume(
        self,
        topic: str,
        group: str,
        handler: RecordHandler,
        max_records: Optional[int] = None,
    ) -> int:
        """
        Deliver uncommitted records of a topic to a handler, one at a time.

        Handler exceptions are logged and the record is still committed,
        so processing always moves on to the next record.

        Returns:
            Number of records handed to the handler
        """
        delivered = 0
        for partition in range(self.partitions):
            while max_records is None or delivered < max_records:
                record = self._next_record(topic, group, partition)
                if record is None:
                    break
                delivered += 1
                self.metrics.record_event_consumed(topic, group)
                self.logger.info(f"Consumed {record} (group={group})")
                try:
                    handler(record)
                except Exception as e:
                    self.logger.error(f"Handler raised exception for {record}: {e}")
                self.commit(group, record)
        return delivered

    def commit(self, group: str, record: LogRecord) -> None:
        """Mark a record (and everything before it in its partition) as handled."""
        with self._lock:
            slot = (group, record.topic, record.partition)
            next_offset = record.offset + 1
            if self._committed.get(slot, 0) >= next_offset:
                return
            self._persist({
                "type": "commit",
                "group": group,
                "topic": record.topic,
                "partition": record.partition,
                "offset": next_offset,
            })
            self._committed[slot] = next_offset

    def committed_offset(self, group: str, topic: str, partition: int) -> int:
        with self._lock:
            return self._committed.get((group, topic, partition), 0)

    def lag(self, topic: str, group: str) -> int:
        """Number of records the group has not handled yet."""
        with self._lock:
            return sum(
                len(records) - self._committed.get((group, topic, partition), 0)
                for partition, records in enumerate(self._partitions(topic))
            )

    def get_records(self, topic: str) -> list[LogRecord]:
        """All records of a topic, partition by partition (for debugging and tests)."""
        with self._lock:
            return [r for records in self._partitions(topic) for r in records]

    # =========================================================================
    # Internals
    # =========================================================================

    def _partitions(self, topic: str) -> list[list[LogRecord]]:
        if topic not in self._records:
            self._records[topic] = [[] for _ in range(self.partitions)]
        return self._records[topic]

    def _next_record(self, topic: str, group: str, partition: int) -> Optional[LogRecord]:
        with self._lock:
            records = self._partitions(topic)[partition]
            offset = self._committed.get((group, topic, partition), 0)
            if offset < len(records):
                return records[offset]
            return None

    @staticmethod
    def _record_to_dict(record: LogRecord) -> dict:
        return {
            "topic": record.topic,
            "partition": record.partition,
            "offset": record.offset,
            "key": record.key,
            "value": record.value,
            "timestamp": record.timestamp.isoformat(),
        }

    def _persist(self, entry: dict) -> None:
        if not self.path:
            return
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry) + "\n")
        except OSError as e:
            raise EventLogError(f"failed to write event log {self.path}: {e}") from e

    def _load(self) -> None:
        """Rebuild records and committed offsets from the backing file."""
        with open(self.path, "r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    self.logger.warning(f"Skipping corrupt event log line {line_number} in {self.path}")
                    continue
                if entry.get("type") == "record":
                    record = LogRecord(
                        topic=entry["topic"],
                        partition=entry["partition"],
                        offset=entry["offset"],
                        key=entry["key"],
                        value=entry["value"],
                        timestamp=datetime.fromisoformat(entry["timestamp"]),
                    )
                    self._partitions(record.topic)[record.partition].append(record)
                elif entry.get("type") == "commit":
                    slot = (entry["group"], entry["topic"], entry["partition"])
                    self._committed[slot] = max(self._committed.get(slot, 0), entry["offset"])

    def reload(self) -> None:
        """Pick up records appended to the backing file by other processes."""
        if not self.path or not self.path.exists():
            return
        with self._lock:
            self._records.clear()
            self._committed.clear()
            self._load()


class EventConsumer:
    """
    A single consumption loop for one topic and consumer group.

    Records are processed sequentially. Scaling out means running more
    processes, not more threads.
    """

    def __init__(
        self,
        event_log: EventLog,
        topic: str,
        group: str,
        handler: RecordHandler,
        logger: Optional[logging.Logger] = None,
    ):
        self.event_log = event_log
        self.topic = topic
        self.group = group
        self.handler = handler
        self.logger = logger or logging.getLogger("event_consumer")

    def poll(self, max_records: Optional[int] = None) -> int:
        """Handle whatever is waiting. Returns the number of records handled."""
        return self.event_log.consume(self.topic, self.group, self.handler, max_records=max_records)

    def run(self, stop_event: threading.Event, poll_interval: float = 0.5) -> None:
        """Poll until stop_event is set."""
        self.logger.info(f"Starting consumer for '{self.topic}' (group={self.group})")
        while not stop_event.is_set():
            # A file-backed log may be appended to by another process
            self.event_log.reload()
            if self.poll() == 0:
                stop_event.wait(poll_interval)
        self.logger.info(f"Consumer for '{self.topic}' stopped")
