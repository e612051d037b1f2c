from types import SimpleNamespace

import pytest

from pychip8.utils.trace import TraceRecorder


def _state(pc: int, **kwargs):
    defaults = {"v": [0] * 16, "i": 0x000, "sp": 0, "dt": 0, "st": 0}
    defaults.update(kwargs)
    return SimpleNamespace(pc=pc, **defaults)


def test_trace_recorder_overwrites_old_entries():
    recorder = TraceRecorder(capacity=2)

    recorder.record_step(_state(0x200), 0x6012, waiting=False, mnemonic="LD V0, 0x12")
    recorder.record_step(_state(0x202, i=0x300), 0xA300, waiting=False, mnemonic="LD I, 0x300")
    recorder.record_step(_state(0x204, sp=1, dt=0x3C), None, waiting=True, note="key-wait")

    lines = list(recorder.format_entries())
    assert len(lines) == 2
    assert "pc=202" in lines[0]
    assert "I=0300" in lines[0]
    assert "pc=204" in lines[1]
    assert "DT=3C" in lines[1]
    assert "flags=WAIT,key-wait" in lines[1]


def test_trace_recorder_handles_missing_opcode():
    recorder = TraceRecorder(1)
    recorder.record_step(_state(0x200, v=[0xAB] + [0] * 15), None, waiting=False)
    lines = list(recorder.format_entries())
    assert len(lines) == 1
    assert "opcode=----" in lines[0]
    assert "V=[AB 00" in lines[0]
    assert "flags=-" in lines[0]


def test_trace_recorder_limit_and_clear():
    recorder = TraceRecorder(4)
    for offset in range(3):
        recorder.record_step(_state(0x200 + offset * 2), 0x1200, waiting=False)

    assert [entry.pc for entry in recorder.entries(limit=2)] == [0x202, 0x204]
    assert recorder.last_entry().pc == 0x204

    recorder.clear()
    assert recorder.last_entry() is None
    assert list(recorder.entries()) == []


def test_trace_recorder_rejects_zero_capacity():
    with pytest.raises(ValueError):
        TraceRecorder(0)
