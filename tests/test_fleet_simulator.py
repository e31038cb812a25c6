import math
import pytest
from wms_state.config.settings import FleetConfig
from wms_state.fleet.amr import AMR, default_fleet
from wms_state.fleet.simulator import FleetSimulator
from wms_state.warehouse.layout import WarehouseLayout

def make_sim(amrs=None, **kw):
    cfg = FleetConfig(wander_probability=0.0, seed=1, **kw)
    return FleetSimulator(WarehouseLayout.default(), cfg, amrs=amrs)

def one_amr(x=100.0, y=500.0, status="idle", **kw):
    return AMR(id="amr-1", name="AMR-001", x=x, y=y, target_x=x, target_y=y, status=status, **kw)

def test_arrival_converges_to_target():
    sim = make_sim([one_amr()])
    assert sim.move_to("amr-1", 400.0, 120.0)
    for _ in range(1000):
        snap = sim.tick()
        if snap[0].status == "idle":
            break
    a = snap[0]
    assert a.status == "idle"
    assert a.position == (400.0, 120.0)
    assert a.recent_path == ()

def test_trail_is_capped_at_ten_points():
    sim = make_sim([one_amr()])
    sim.move_to("amr-1", 900.0, 500.0)
    snap = sim.run_ticks(25)
    assert snap[0].status == "moving"
    assert len(snap[0].recent_path) == 10
    # el último punto del rastro es la posición actual
    assert snap[0].recent_path[-1] == snap[0].position

def test_each_step_advances_by_speed():
    sim = make_sim([one_amr(speed=3.0)])
    sim.move_to("amr-1", 100.0, 0.0)
    before = sim.snapshot()[0].position
    after = sim.tick()[0].position
    assert math.isclose(math.dist(before, after), 3.0)

def test_move_to_overrides_any_state_and_unknown_id():
    sim = make_sim([one_amr(status="charging")])
    assert sim.move_to("amr-1", 10.0, 10.0)
    assert sim.snapshot()[0].status == "moving"
    assert sim.snapshot()[0].current_task == "Movimiento manual"
    assert not sim.move_to("amr-99", 1.0, 1.0)

def test_idle_wander_targets_a_zone_centroid():
    sim = FleetSimulator(WarehouseLayout.default(), FleetConfig(wander_probability=1.0, seed=3), amrs=[one_amr()])
    a = sim.tick()[0]
    centroids = {z.centroid for z in sim.layout.zones}
    assert a.status == "moving"
    assert a.target in centroids

def test_no_wander_when_probability_zero():
    sim = make_sim([one_amr()])
    assert sim.run_ticks(200)[0].status == "idle"

def test_charging_manual_never_exits():
    sim = make_sim([one_amr(status="charging", battery_level=40.0)])
    assert sim.run_ticks(500)[0].status == "charging"
    assert sim.release_from_charging("amr-1")
    assert sim.snapshot()[0].status == "idle"
    assert not sim.release_from_charging("amr-1")

def test_charging_on_full_policy():
    sim = make_sim([one_amr(status="charging", battery_level=95.0)],
                   charging_policy="on_full", charge_rate_per_tick=1.0)
    sim.run_ticks(4)
    assert sim.snapshot()[0].status == "charging"
    a = sim.run_ticks(1)[0]
    assert a.status == "idle" and a.battery_level == 100.0

def test_send_to_charging_only_when_idle():
    sim = make_sim([one_amr()])
    assert sim.send_to_charging("amr-1")
    sim.move_to("amr-1", 500.0, 500.0)
    assert not sim.send_to_charging("amr-1")

def test_snapshots_are_copies():
    sim = make_sim([one_amr()])
    snap = sim.snapshot()
    sim.move_to("amr-1", 300.0, 300.0)
    sim.tick()
    assert snap[0].status == "idle" and snap[0].position == (100.0, 500.0)

def test_default_fleet_shape():
    fleet = default_fleet()
    assert len(fleet) == 8
    assert [a.status for a in fleet].count("charging") == 1
    assert fleet[0].position == (100.0, 500.0)

def test_start_and_stop_are_idempotent():
    sim = FleetSimulator(WarehouseLayout.default(), FleetConfig(tick_hz=200.0, wander_probability=0.0))
    sim.stop()  # detener algo que nunca arrancó
    sim.start()
    sim.start()
    assert sim.running
    sub = sim.subscribe()
    first = sub.get(timeout=2.0)
    assert len(first) == 8
    sim.stop()
    sim.stop()
    assert not sim.running
    assert sim.ticks >= 1

def test_charging_commands_publish_snapshot():
    sim = make_sim([one_amr()])
    sub = sim.subscribe()
    assert sim.send_to_charging("amr-1")
    assert sub.get(timeout=1.0)[0].status == "charging"
    assert sim.release_from_charging("amr-1")
    assert sub.get(timeout=1.0)[0].status == "idle"
    assert not sim.release_from_charging("amr-1")
    assert sub.drain() == []

def test_non_positive_speed_is_rejected():
    for speed in (0.0, -2.0):
        with pytest.raises(ValueError):
            one_amr(speed=speed)
