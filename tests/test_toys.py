from datetime import datetime, timedelta, timezone

from sanctuary.constants import TOY_SESSIONS_TABLE
from sanctuary.toys import CONNECTED, DISCONNECTED, PAIRING, PRESET_PATTERNS, ToySimulator, battery_color


class StepClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


def test_sample_toys_and_pairing():
    simulator = ToySimulator()
    assert [toy.connection_status for toy in simulator.toys] == [CONNECTED, DISCONNECTED]

    simulator.begin_pairing("2")
    assert simulator.get("2").connection_status == PAIRING
    simulator.finish_pairing("2")
    assert simulator.get("2").connection_status == CONNECTED


def test_intensity_is_clamped_and_needs_a_toy():
    simulator = ToySimulator()
    simulator.update_intensity(80)
    assert simulator.custom_intensity == 50

    simulator.select_toy("1")
    simulator.update_intensity(140)
    assert simulator.custom_intensity == 100
    assert simulator.active_toy.current_intensity == 100
    simulator.update_intensity(-5)
    assert simulator.active_toy.current_intensity == 0


def test_start_requires_selected_toy():
    simulator = ToySimulator()
    assert simulator.start() is False
    assert not simulator.is_playing


def test_stop_writes_session_and_resets(backend, identity):
    clock = StepClock()
    simulator = ToySimulator(clock=clock)
    simulator.select_toy("1")
    simulator.select_pattern(PRESET_PATTERNS[1])
    simulator.update_intensity(65)
    simulator.mood_before = 7
    simulator.notes = "lovely"
    assert simulator.start() is True

    clock.advance(95)
    record = simulator.stop(backend, identity.id)

    assert record["duration"] == "95 seconds"
    stored = backend.select(TOY_SESSIONS_TABLE)
    assert len(stored) == 1
    session = stored[0]
    assert session["toy_name"] == "Lovense Edge"
    assert session["created_by"] == identity.id
    assert session["mood_before"] == 7
    assert session["session_notes"] == "lovely"
    assert session["session_data"] == {"pattern": "Pulse Play", "max_intensity": 90, "avg_intensity": 65}

    assert not simulator.is_playing
    assert simulator.mood_before == 5
    assert simulator.notes == ""


def test_stop_without_session_is_noop(backend, identity):
    simulator = ToySimulator()
    simulator.select_toy("1")
    assert simulator.stop(backend, identity.id) is None
    assert backend.select(TOY_SESSIONS_TABLE) == []


def test_battery_color():
    assert battery_color(85) == "green"
    assert battery_color(45) == "orange"
    assert battery_color(10) == "red"
