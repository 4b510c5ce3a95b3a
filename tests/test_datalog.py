import pytest

from robopallets.datalog import (
    Datalog,
    DatalogError,
    Erased,
    NewRecord,
    RingBufferIndex,
    RingBufferItem,
)
from robopallets.support import BadOrigin, Timestamp, none, signed

WINDOW = 20
MAX_MESSAGE = 512

_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def _b58decode(text):
    number = 0
    for char in text:
        number = number * 58 + _ALPHABET.index(char)
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    zeros = len(text) - len(text.lstrip("1"))
    return b"\x00" * zeros + body


@pytest.fixture
def time():
    return Timestamp()


@pytest.fixture
def datalog(time):
    return Datalog(WINDOW, time=time, max_record_size=MAX_MESSAGE)


def test_ringbuffer_index():
    idx = RingBufferIndex()
    assert idx.start == idx.end
    assert idx.start == 0

    i = idx.add(WINDOW)
    assert i == 0
    assert idx.end == 1
    assert idx.count(WINDOW) == 1

    for _ in range(WINDOW):
        idx.add(WINDOW)
    assert idx.count(WINDOW) == WINDOW - 1


def test_ringbuffer_iter_drains():
    idx = RingBufferIndex(start=18, end=2)
    assert list(idx.iter(WINDOW)) == [18, 19, 0, 1]
    assert idx.start == idx.end == 2


def test_store_data(datalog):
    sender = 1
    record = b"datalog"
    datalog.record(signed(sender), record)
    assert datalog.data(sender) == [RingBufferItem(0, record)]
    assert list(datalog.events) == [NewRecord(sender, 0, record)]


def test_recycle_data(datalog):
    sender = 1
    for i in range(WINDOW + 10):
        datalog.record(signed(sender), i.to_bytes(8, "big"))

    expected = [RingBufferItem(0, i.to_bytes(8, "big")) for i in range(11, WINDOW + 10)]
    assert datalog.data(sender) == expected
    idx = datalog.datalog_index(sender)
    assert idx == RingBufferIndex(start=11, end=10)
    assert idx.count(WINDOW) == WINDOW - 1


def test_data_does_not_move_stored_index(datalog):
    datalog.record(signed(1), b"a")
    datalog.data(1)
    assert datalog.datalog_index(1) == RingBufferIndex(start=0, end=1)


def test_erase_data(datalog):
    sender = 1
    record = b"datalog"
    datalog.record(signed(sender), record)
    assert datalog.data(sender) == [RingBufferItem(0, record)]
    assert datalog.datalog_index(sender) == RingBufferIndex(start=0, end=1)

    datalog.erase(signed(sender))
    assert datalog.data(sender) == []
    assert datalog.datalog_index(sender) == RingBufferIndex(start=0, end=0)
    assert datalog.datalog_item(sender, 0) == RingBufferItem()
    assert datalog.events[-1] == Erased(sender)


def test_bad_origin(datalog):
    with pytest.raises(BadOrigin):
        datalog.record(none(), b"")


def test_erase_bad_origin(datalog):
    with pytest.raises(BadOrigin):
        datalog.erase(none())


def test_record_too_big(datalog):
    with pytest.raises(DatalogError) as info:
        datalog.record(signed(1), b"\x00" * (MAX_MESSAGE + 1))
    assert info.value.variant == "RecordTooBig"
    assert datalog.data(1) == []


def test_accounts_are_separate(datalog):
    datalog.record(signed(1), b"one")
    datalog.record(signed(2), b"two")
    assert datalog.data(1) == [RingBufferItem(0, b"one")]
    assert datalog.data(2) == [RingBufferItem(0, b"two")]


def test_invalid_window():
    with pytest.raises(ValueError):
        Datalog(0)


def test_store_ipfs_hashes(datalog, time):
    sender = 1
    record = _b58decode("QmWboFP8XeBtFMbNYK3Ne8Z3gKFBSR5iQzkKgeNgQz3dz4")
    datalog.record(signed(sender), record)
    assert datalog.data(sender) == [RingBufferItem(0, record)]

    record2 = _b58decode("zdj7WWYAEceQ6ncfPZeRFjozov4dC7FaxU7SuMwzW4VuYBDta")
    time.set(100)
    datalog.record(signed(sender), record2)
    assert datalog.data(sender) == [RingBufferItem(0, record), RingBufferItem(100, record2)]

    record3 = _b58decode("QmWboFP8XeBtFMbNYK3Ne8Z3gKFBSR5iQzkKgeNgQz3dz2")
    time.set(200)
    datalog.record(signed(sender), record3)
    assert datalog.data(sender) == [
        RingBufferItem(0, record),
        RingBufferItem(100, record2),
        RingBufferItem(200, record3),
    ]