import pytest

from seqstream.core.buffer import GrowableBuffer, next_power_of_two


def test_next_power_of_two():
    assert next_power_of_two(1) == 1
    assert next_power_of_two(2) == 2
    assert next_power_of_two(3) == 4
    assert next_power_of_two(16) == 16
    assert next_power_of_two(17) == 32
    with pytest.raises(ValueError):
        next_power_of_two(0)


def test_ensure_capacity_reserves_terminator():
    buf = GrowableBuffer()
    assert buf.capacity == 0
    buf.ensure_capacity(0)
    assert buf.capacity == 1
    buf.ensure_capacity(7)
    assert buf.capacity == 8
    buf.ensure_capacity(8)
    assert buf.capacity == 16
    with pytest.raises(ValueError):
        buf.ensure_capacity(-1)


def test_growth_preserves_content():
    buf = GrowableBuffer(b"ACGT")
    buf.ensure_capacity(1000)
    assert buf.capacity == 1024
    assert buf.value == b"ACGT"


def test_reset_keeps_storage():
    buf = GrowableBuffer(b"A" * 100)
    capacity = buf.capacity
    buf.reset()
    assert len(buf) == 0
    assert buf.value == b""
    assert buf.capacity == capacity
    buf.append(b"TT")
    assert buf.value == b"TT"


def test_release_drops_storage():
    buf = GrowableBuffer(b"ACGT")
    buf.release()
    assert buf.capacity == 0
    assert len(buf) == 0


def test_growth_invariant():
    buf = GrowableBuffer()
    max_length = 0
    for size in [1, 0, 3, 5, 1, 30, 2, 100, 7, 1, 500]:
        if size == 7:
            buf.reset()
        buf.append(b"N" * size)
        buf.append_byte(ord("A"))
        max_length = max(max_length, len(buf))
        assert buf.capacity == next_power_of_two(max_length + 1)
        assert len(buf) <= buf.capacity - 1


def test_terminate_on_empty_buffer():
    buf = GrowableBuffer()
    buf.terminate()
    assert buf.capacity == 1
    assert len(buf) == 0


def test_truncate_and_last_byte():
    buf = GrowableBuffer(b"AC\r")
    assert buf.last_byte() == ord("\r")
    buf.truncate(2)
    assert buf == b"AC"
    assert GrowableBuffer().last_byte() is None
    with pytest.raises(ValueError):
        buf.truncate(3)


def test_equality_and_decode():
    buf = GrowableBuffer(b"seq1")
    assert buf == b"seq1"
    assert buf == GrowableBuffer(b"seq1")
    assert buf != b"seq2"
    assert buf.decode() == "seq1"
    assert bytes(buf) == b"seq1"
