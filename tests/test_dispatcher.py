import pytest

from carriers.models import CarrierContractError, CarrierStatus, SimCarrier
from dispatch.dispatcher import CapacityExceededError, Dispatcher
from dispatch.policy import DispatchPolicy
from jobs.models import Job, WeightTier


def make_dispatcher(fleet_size=3):
    return Dispatcher(policy=DispatchPolicy(fleet_size=fleet_size))


def register(dispatcher, count):
    carriers = [SimCarrier(id=f"carrier_{i}") for i in range(count)]
    for carrier in carriers:
        dispatcher.register_waiting(carrier)
    return carriers


def test_single_carrier_takes_lone_light_job():
    dispatcher = make_dispatcher()
    job_a = Job("A", weight=1500, destination=3)
    dispatcher.enqueue(job_a)
    [carrier] = register(dispatcher, 1)

    result = dispatcher.step()

    assert result.ok
    assert carrier.primary is job_a
    assert carrier.secondary is None
    assert carrier.status == CarrierStatus.DISPATCHED
    assert carrier.in_team is False
    assert carrier.team_size == 1
    assert len(dispatcher.waiting_line) == 0
    assert dispatcher.pool.is_empty()


def test_solo_carrier_takes_two_highest_jobs_in_order():
    dispatcher = make_dispatcher()
    for job_id, destination, priority in [("low", 1, None), ("top", 2, 50), ("next", 6, None)]:
        dispatcher.enqueue(Job(job_id, weight=300, destination=destination, priority_level=priority))
    [carrier] = register(dispatcher, 1)

    result = dispatcher.step()

    # 1. Primary holds the highest-ranked job, secondary the runner-up
    assert carrier.primary.job_id == "top"
    assert carrier.secondary.job_id == "next"

    # 2. The third job is still pending
    assert [record.job_id for record in dispatcher.pool.records(WeightTier.SINGLE)] == ["low"]

    # 3. The assignment is reported
    [assignment] = result.assignments
    assert assignment.tier == WeightTier.SINGLE
    assert [job.job_id for job in assignment.jobs] == ["top", "next"]
    assert not assignment.team


def test_solo_load_limit_of_one():
    dispatcher = Dispatcher(policy=DispatchPolicy(fleet_size=2, solo_load_limit=1))
    dispatcher.enqueue(Job("a", weight=300, destination=1))
    dispatcher.enqueue(Job("b", weight=300, destination=2))
    first, second = register(dispatcher, 2)

    dispatcher.step()

    assert first.primary.job_id == "b" and first.secondary is None
    assert second.primary.job_id == "a" and second.secondary is None


def test_solo_dispatch_never_takes_heavy_jobs():
    dispatcher = make_dispatcher(fleet_size=3)
    dispatcher.enqueue(Job("light", weight=100, destination=5))
    dispatcher.enqueue(Job("pair", weight=2300, destination=1))
    [carrier] = register(dispatcher, 1)

    dispatcher.step()

    assert carrier.loaded_jobs() == [carrier.primary]
    assert carrier.primary.job_id == "light"
    assert dispatcher.pool.head(WeightTier.PAIR).job_id == "pair"


def test_idle_carrier_stays_when_nothing_is_pending():
    dispatcher = make_dispatcher()
    [carrier] = register(dispatcher, 1)

    result = dispatcher.step()

    assert result.ok
    assert result.deferred == [carrier]
    assert carrier in dispatcher.waiting_line
    assert carrier.status == CarrierStatus.WAITING


def test_capacity_error_when_team_exceeds_fleet():
    dispatcher = make_dispatcher(fleet_size=2)
    job_c = Job("C", weight=2800, destination=1)
    dispatcher.enqueue(job_c)
    carriers = register(dispatcher, 2)

    result = dispatcher.step()

    # 1. The error names the job
    assert not result.ok
    assert result.capacity_error.job is job_c
    assert result.capacity_error.required == 3
    assert result.capacity_error.fleet_size == 2
    assert "C" in str(result.capacity_error)

    # 2. Nothing moved
    assert dispatcher.pool.head(WeightTier.TRIPLE).job is job_c
    assert dispatcher.waiting_line.snapshot() == carriers
    assert all(carrier.is_empty() for carrier in carriers)

    with pytest.raises(CapacityExceededError):
        result.raise_for_error()


def test_carriers_out_on_a_trip_still_count_towards_the_fleet():
    """
    A fleet of three with two carriers away: the TRIPLE job waits, it is not
    reported as beyond the fleet.
    """
    job_c = Job("C", weight=2800, destination=1)

    for idle_count in (1, 2):
        dispatcher = make_dispatcher(fleet_size=3)
        dispatcher.enqueue(job_c)
        carriers = register(dispatcher, idle_count)

        result = dispatcher.step()

        assert result.ok
        assert result.deferred == carriers
        assert dispatcher.fleet_size == 3
        assert dispatcher.pool.head(WeightTier.TRIPLE).job is job_c


@pytest.mark.parametrize("fleet_size", [None, 0, -1])
def test_dispatcher_requires_a_valid_fleet_size(fleet_size):
    with pytest.raises(ValueError):
        Dispatcher(policy=DispatchPolicy(fleet_size=fleet_size))


def test_short_handed_team_leaves_every_tier_and_carrier_alone():
    """
    Two idle carriers, a TRIPLE job at the top and a lower-ranked SINGLE job:
    both carriers wait and neither tier changes.
    """
    dispatcher = make_dispatcher(fleet_size=3)
    dispatcher.enqueue(Job("triple", weight=2900, destination=1, priority_level=5))
    dispatcher.enqueue(Job("light", weight=100, destination=9))
    carriers = register(dispatcher, 2)

    result = dispatcher.step()

    # 1. Both carriers are deferred untouched
    assert result.ok
    assert result.assignments == []
    assert result.deferred == carriers
    assert dispatcher.waiting_line.snapshot() == carriers
    for carrier in carriers:
        assert carrier.is_empty()
        assert carrier.status == CarrierStatus.WAITING
        assert carrier.in_team is False and carrier.team_size == 1

    # 2. Both tiers still hold their job
    assert [record.job_id for record in dispatcher.pool.records(WeightTier.SINGLE)] == ["light"]
    assert [record.job_id for record in dispatcher.pool.records(WeightTier.TRIPLE)] == ["triple"]


def test_team_is_all_or_nothing_when_a_member_is_loaded():
    """
    The second team member is still loaded: no job leaves the tier and the
    offered carrier is not touched.
    """
    dispatcher = make_dispatcher(fleet_size=3)
    job_c = Job("C", weight=2800, destination=1)
    dispatcher.enqueue(job_c)
    first, second, third = register(dispatcher, 3)
    second.add_to_primary(Job("leftover", weight=10, destination=2))

    with pytest.raises(CarrierContractError):
        dispatcher.step()

    assert dispatcher.pool.head(WeightTier.TRIPLE).job is job_c
    assert first.is_empty()
    assert first.status == CarrierStatus.WAITING
    assert first.in_team is False and first.team_size == 1
    assert third.is_empty()
    assert dispatcher.waiting_line.snapshot() == [first, second, third]


def test_triple_team_takes_one_job():
    dispatcher = make_dispatcher(fleet_size=3)
    job_c = Job("C", weight=2800, destination=1)
    dispatcher.enqueue(job_c)
    carriers = register(dispatcher, 3)

    result = dispatcher.step()

    assert result.ok
    [assignment] = result.assignments
    assert assignment.team
    assert assignment.tier == WeightTier.TRIPLE
    assert assignment.jobs == [job_c]
    assert assignment.carriers == carriers

    for carrier in carriers:
        assert carrier.in_team is True
        assert carrier.team_size == 3
        assert carrier.primary is job_c
        assert carrier.secondary is None
        assert carrier.status == CarrierStatus.DISPATCHED

    assert dispatcher.pool.is_empty()
    assert len(dispatcher.waiting_line) == 0


def test_team_waits_for_enough_idle_carriers():
    """
    One idle carrier and a TRIPLE job: nothing changes, the carrier waits.
    """
    dispatcher = make_dispatcher(fleet_size=3)
    dispatcher.enqueue(Job("C", weight=2800, destination=1))
    [carrier] = register(dispatcher, 1)

    result = dispatcher.step()

    assert result.ok
    assert result.assignments == []
    assert result.deferred == [carrier]
    assert carrier in dispatcher.waiting_line
    assert carrier.is_empty() and carrier.status == CarrierStatus.WAITING
    assert len(dispatcher.pool.records(WeightTier.TRIPLE)) == 1

    # 2. Once the rest of the fleet shows up the team forms
    register_more = [SimCarrier(id="late_1"), SimCarrier(id="late_2")]
    for late in register_more:
        dispatcher.register_waiting(late)

    result = dispatcher.step()

    [assignment] = result.assignments
    assert assignment.carriers == [carrier] + register_more


def test_pair_team_then_solo_in_same_tick():
    dispatcher = make_dispatcher(fleet_size=4)
    dispatcher.enqueue(Job("pair", weight=2300, destination=1, priority_level=20))
    dispatcher.enqueue(Job("light", weight=100, destination=1))
    first, second, third = register(dispatcher, 3)

    result = dispatcher.step()

    # 1. The first two carriers pair up on the expedited heavy job
    assert first.primary.job_id == "pair" and second.primary.job_id == "pair"
    assert first.team_size == second.team_size == 2

    # 2. The third carrier, visited once, goes solo with the light job
    assert third.primary.job_id == "light"
    assert third.in_team is False

    assert [len(a.carriers) for a in result.assignments] == [2, 1]
    assert len(dispatcher.waiting_line) == 0


def test_capacity_error_keeps_earlier_assignments_and_later_carriers():
    dispatcher = make_dispatcher(fleet_size=2)
    dispatcher.enqueue(Job("light", weight=100, destination=9))
    dispatcher.enqueue(Job("triple", weight=2900, destination=1))
    first, second = register(dispatcher, 2)

    result = dispatcher.step()

    assert first.primary.job_id == "light"
    assert result.capacity_error.job.job_id == "triple"
    assert dispatcher.waiting_line.snapshot() == [second]
    assert second.is_empty()


def test_withdraw_after_capacity_error_unblocks_the_line():
    dispatcher = make_dispatcher(fleet_size=2)
    dispatcher.enqueue(Job("triple", weight=2900, destination=5))
    dispatcher.enqueue(Job("light", weight=100, destination=1))
    [carrier] = register(dispatcher, 1)

    result = dispatcher.step()
    dispatcher.pool.withdraw(result.capacity_error.job.job_id)
    result = dispatcher.step()

    assert result.ok
    assert carrier.primary.job_id == "light"


def test_loaded_carrier_is_a_contract_breach():
    dispatcher = make_dispatcher()
    carrier = SimCarrier(id="busy")
    carrier.add_to_primary(Job("x", weight=10, destination=1))
    dispatcher.register_waiting(carrier)

    with pytest.raises(CarrierContractError):
        dispatcher.step()


def test_registering_twice_is_a_contract_breach():
    dispatcher = make_dispatcher()
    carrier = SimCarrier(id="dup")
    dispatcher.register_waiting(carrier)

    with pytest.raises(CarrierContractError):
        dispatcher.register_waiting(carrier)
