from __future__ import annotations

from datetime import datetime

import pytest

from src.timeclock.timeclock.core.enums import ActionType
from src.timeclock.timeclock.core.exceptions import MalformedActionLog
from src.timeclock.timeclock.working_sessions.converter import PauseInterval, convert
from src.timeclock.timeclock.working_sessions.model import Action

T0 = datetime(2026, 3, 2, 8, 0, 0)
T1 = datetime(2026, 3, 2, 12, 0, 0)
T2 = datetime(2026, 3, 2, 12, 30, 0)
T3 = datetime(2026, 3, 2, 17, 0, 0)


def _log(*events):
    return [
        Action(action_id=i, session_id=1, action_type=kind, action_time=at)
        for i, (kind, at) in enumerate(events, start=1)
    ]


def test_single_pause_is_paired():
    summary = convert(
        _log(
            (ActionType.STARTS_AT, T0),
            (ActionType.PAUSE_STARTS_AT, T1),
            (ActionType.PAUSE_ENDS_AT, T2),
            (ActionType.ENDS_AT, T3),
        )
    )

    assert summary.pauses == (PauseInterval(starts_at=T1, ends_at=T2),)
    assert summary.pause_count == 1
    assert summary.as_time_tracking_fields() == {"starts_at": T0, "ends_at": T3}


def test_no_pauses_yields_empty_list():
    summary = convert(_log((ActionType.STARTS_AT, T0), (ActionType.ENDS_AT, T1)))

    assert summary.pauses == ()
    assert summary.starts_at == T0
    assert summary.ends_at == T1


def test_multiple_pauses_keep_log_order():
    t4 = datetime(2026, 3, 2, 15, 0, 0)
    t5 = datetime(2026, 3, 2, 15, 10, 0)
    summary = convert(
        _log(
            (ActionType.STARTS_AT, T0),
            (ActionType.PAUSE_STARTS_AT, T1),
            (ActionType.PAUSE_ENDS_AT, T2),
            (ActionType.PAUSE_STARTS_AT, t4),
            (ActionType.PAUSE_ENDS_AT, t5),
            (ActionType.ENDS_AT, T3),
        )
    )

    assert summary.pauses == (PauseInterval(T1, T2), PauseInterval(t4, t5))


def test_unclosed_pause_is_malformed():
    with pytest.raises(MalformedActionLog) as exc:
        convert(_log((ActionType.STARTS_AT, T0), (ActionType.PAUSE_STARTS_AT, T1)), session_id=7)

    assert exc.value.session_id == 7
    assert "never closed" in str(exc.value)


def test_double_pause_start_is_malformed():
    with pytest.raises(MalformedActionLog):
        convert(
            _log(
                (ActionType.STARTS_AT, T0),
                (ActionType.PAUSE_STARTS_AT, T1),
                (ActionType.PAUSE_STARTS_AT, T2),
                (ActionType.PAUSE_ENDS_AT, T3),
            )
        )


def test_pause_end_without_start_is_malformed():
    with pytest.raises(MalformedActionLog):
        convert(_log((ActionType.STARTS_AT, T0), (ActionType.PAUSE_ENDS_AT, T1), (ActionType.ENDS_AT, T2)))


def test_pause_ending_before_it_starts_is_malformed():
    with pytest.raises(MalformedActionLog):
        convert(_log((ActionType.PAUSE_STARTS_AT, T2), (ActionType.PAUSE_ENDS_AT, T1)))


def test_duplicate_markers_are_malformed():
    with pytest.raises(MalformedActionLog):
        convert(_log((ActionType.STARTS_AT, T0), (ActionType.STARTS_AT, T1)))
    with pytest.raises(MalformedActionLog):
        convert(_log((ActionType.ENDS_AT, T1), (ActionType.ENDS_AT, T2)))


def test_missing_markers_leave_fields_to_caller():
    summary = convert(_log((ActionType.PAUSE_STARTS_AT, T1), (ActionType.PAUSE_ENDS_AT, T2)))

    assert summary.as_time_tracking_fields() == {}
    assert summary.pauses == (PauseInterval(T1, T2),)


def test_conversion_is_repeatable():
    log = _log(
        (ActionType.STARTS_AT, T0),
        (ActionType.PAUSE_STARTS_AT, T1),
        (ActionType.PAUSE_ENDS_AT, T2),
        (ActionType.ENDS_AT, T3),
    )

    assert convert(log) == convert(log)


def test_unknown_action_type_is_malformed():
    log = [
        Action(action_id=1, session_id=5, action_type=ActionType.STARTS_AT, action_time=T0),
        Action(action_id=2, session_id=5, action_type="lunch_break", action_time=T1),
    ]

    with pytest.raises(MalformedActionLog) as exc:
        convert(log, session_id=5)

    assert exc.value.session_id == 5
    assert "lunch_break" in str(exc.value)
