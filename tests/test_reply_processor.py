"""Tests for splitting replies into status records."""

from camera_registrator.adapters.status_record_parser import JsonStatusRecordParser
from camera_registrator.domain.cameras import CameraStatus
from camera_registrator.services.replies import ReplyProcessor
from tests.conftest import record


def _processor(
    dispatched: list[tuple[str, CameraStatus]], **kwargs: object
) -> ReplyProcessor:
    return ReplyProcessor(
        parser=JsonStatusRecordParser(),
        on_record=lambda serial, status: dispatched.append((serial, status)),
        **kwargs,  # type: ignore[arg-type]
    )


def test_back_to_back_records_dispatch_in_order() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched)

    count = processor.feed(record(101) + record(205) + record(7) + b"garbage{")

    assert count == 3
    assert [serial for serial, _ in dispatched] == ["101", "205", "7"]


def test_non_positive_serials_are_not_dispatched() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched)

    count = processor.feed(record(0) + record(-4) + record(12))

    assert count == 1
    assert dispatched[0][0] == "12"


def test_buffer_without_records_is_dropped() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched)

    assert processor.feed(b"HTTP/1.1 500 Internal Server Error\r\n") == 0
    assert dispatched == []


def test_split_record_is_lost_by_default() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched)
    payload = record(101)

    processor.feed(payload[:5])
    processor.feed(payload[5:])

    assert dispatched == []
    assert processor.pending == b""


def test_split_record_is_carried_over_when_enabled() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched, carry_partial_records=True)
    payload = record(101) + record(205)

    processor.feed(payload[:25])
    processor.feed(payload[25:])

    assert [serial for serial, _ in dispatched] == ["101", "205"]
    assert processor.pending == b""


def test_oversized_partial_record_is_dropped() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(
        dispatched, carry_partial_records=True, max_pending_bytes=8
    )

    processor.feed(b'{"serial": 101, "note": "long')

    assert processor.pending == b""


def test_reset_forgets_partial_record() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched, carry_partial_records=True)

    processor.feed(b'{"serial": 1')
    processor.reset()
    processor.feed(b"}")

    assert dispatched == []


def test_stray_brace_in_trailing_noise_does_not_block_later_records() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched, carry_partial_records=True)

    processor.feed(record(101) + b"garbage{")
    for _ in range(5):
        processor.feed(record(205))

    assert [serial for serial, _ in dispatched] == ["101"] + ["205"] * 5
    assert processor.pending == b""


def test_carried_record_completed_across_three_deliveries() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched, carry_partial_records=True)

    processor.feed(b'{"serial": ')
    processor.feed(b'42, "state": ')
    processor.feed(b'"armed"}')

    assert [serial for serial, _ in dispatched] == ["42"]
    assert dispatched[0][1].fields == {"state": "armed"}


def test_malformed_object_is_skipped_and_parsing_continues() -> None:
    dispatched: list[tuple[str, CameraStatus]] = []
    processor = _processor(dispatched)

    count = processor.feed(b'{"serial": "front"}' + record(9))

    assert count == 1
    assert dispatched[0][0] == "9"
