import pytest

from linesim.builder import build_schedule, check_no_server_overlap
from linesim.models import DurationMode, FeedPolicy, JobStageRecord, Schedule, Stage


def test_empty_topology_yields_empty_schedule():
    schedule, completed = build_schedule([], 720, DurationMode.MIN)
    assert schedule.records == ()
    assert completed == 0
    assert schedule.makespan == 0


def test_single_stage_cutoff_counts_jobs_within_shift(single_stage):
    schedule, completed = build_schedule(
        single_stage, 30, DurationMode.MIN, feed_policy=FeedPolicy.CUTOFF
    )
    assert [r.finish for r in schedule.records] == [10, 20, 30, 40]
    assert completed == 3
    # overflowing job stays in the schedule
    assert schedule.records[-1].finish > 30


def test_two_stage_line_timeline(two_stage_line):
    schedule, completed = build_schedule(
        two_stage_line, 100, DurationMode.MIN, max_jobs=4, feed_policy=FeedPolicy.CUTOFF
    )
    rows = [(r.job_id, r.stage_index, r.server_index, r.start, r.finish) for r in schedule.records]
    assert rows == [
        (0, 0, 0, 0, 10),
        (0, 1, 0, 10, 15),
        (1, 0, 0, 10, 20),
        (1, 1, 1, 20, 25),
        (2, 0, 0, 20, 30),
        (2, 1, 0, 30, 35),
        (3, 0, 0, 30, 40),
        (3, 1, 1, 40, 45),
    ]
    assert completed == 4


def test_ties_go_to_lowest_server_index():
    stages = [Stage("Wide", 10, 10, 3)]
    schedule, _ = build_schedule(stages, 100, DurationMode.MIN, max_jobs=4)
    assert [r.server_index for r in schedule.records] == [0, 1, 2, 0]
    assert [r.start for r in schedule.records] == [0, 0, 0, 10]


def test_insertion_order_job_then_stage(random_line):
    schedule, _ = build_schedule(random_line, 720, DurationMode.RANDOM_PER_JOB, seed=1)
    keys = [(r.job_id, r.stage_index) for r in schedule.records]
    assert keys == sorted(keys)
    assert len(keys) == schedule.jobs_number * len(random_line)


def test_same_seed_same_schedule(random_line):
    a = build_schedule(random_line, 720, DurationMode.RANDOM_PER_JOB, seed=77)
    b = build_schedule(random_line, 720, DurationMode.RANDOM_PER_JOB, seed=77)
    assert a == b


def test_durations_within_stage_range(random_line):
    schedule, _ = build_schedule(random_line, 720, DurationMode.RANDOM_PER_JOB, seed=5)
    for rec in schedule.records:
        stage = random_line[rec.stage_index]
        assert rec.finish == rec.start + rec.duration
        assert rec.start >= 0
        assert stage.min_duration <= rec.duration <= stage.max_duration


@pytest.mark.parametrize("mode,attr", [(DurationMode.MIN, "min_duration"), (DurationMode.MAX, "max_duration")])
def test_fixed_modes_use_bounds(random_line, mode, attr):
    schedule, _ = build_schedule(random_line, 720, mode)
    for rec in schedule.records:
        assert rec.duration == getattr(random_line[rec.stage_index], attr)


def test_random_per_run_repeats_stage_duration(random_line):
    schedule, _ = build_schedule(random_line, 720, DurationMode.RANDOM_PER_RUN, seed=3)
    per_stage: dict[int, set[float]] = {}
    for rec in schedule.records:
        per_stage.setdefault(rec.stage_index, set()).add(rec.duration)
    assert all(len(v) == 1 for v in per_stage.values())


def test_no_server_overlap(random_line):
    schedule, _ = build_schedule(random_line, 1440, DurationMode.RANDOM_PER_JOB, seed=11)
    assert check_no_server_overlap(schedule)


def test_overlap_is_detected():
    schedule = Schedule(
        records=(
            JobStageRecord(0, 0, 0, 0, 10),
            JobStageRecord(1, 0, 0, 5, 15),
        ),
        stages_number=1,
    )
    with pytest.raises(AssertionError):
        check_no_server_overlap(schedule)


def test_cutoff_completed_matches_exits_within_shift(random_line):
    schedule, completed = build_schedule(
        random_line, 480, DurationMode.RANDOM_PER_JOB, feed_policy=FeedPolicy.CUTOFF, seed=21
    )
    within = {r.job_id for r in schedule.exits() if r.finish <= 480}
    assert completed == len(within)


def test_continuous_feed_stops_after_horizon_entry(single_stage):
    schedule, completed = build_schedule(
        single_stage, 30, DurationMode.MIN, feed_policy=FeedPolicy.CONTINUOUS
    )
    entries = [r.start for r in schedule.records]
    # default horizon is two shifts: the first job entering after 60 is the last
    assert entries[-1] == 70
    assert all(e <= 60 for e in entries[:-1])
    assert completed == 3


def test_continuous_feed_explicit_horizon(single_stage):
    schedule, _ = build_schedule(
        single_stage, 30, DurationMode.MIN, horizon=25, feed_policy=FeedPolicy.CONTINUOUS
    )
    assert [r.start for r in schedule.records] == [0, 10, 20, 30]


def test_max_jobs_truncates_zero_duration_line():
    stages = [Stage("Instant", 0, 0, 1)]
    schedule, completed = build_schedule(
        stages, 30, DurationMode.MIN, max_jobs=50, feed_policy=FeedPolicy.CUTOFF
    )
    assert len(schedule.records) == 50
    assert completed == 50


def test_zero_max_jobs_is_empty(single_stage):
    schedule, completed = build_schedule(single_stage, 30, DurationMode.MIN, max_jobs=0)
    assert schedule.records == ()
    assert completed == 0


def test_invalid_arguments_raise(single_stage):
    with pytest.raises(ValueError):
        build_schedule(single_stage, 30, DurationMode.MIN, max_jobs=-1)
    with pytest.raises(ValueError):
        build_schedule(single_stage, -5, DurationMode.MIN)


def test_topology_is_not_mutated(random_line):
    before = list(random_line)
    build_schedule(random_line, 720, DurationMode.RANDOM_PER_JOB, seed=2)
    assert random_line == before


def test_omitted_seed_uses_fixed_default(random_line):
    implicit = build_schedule(random_line, 720, DurationMode.RANDOM_PER_JOB)
    explicit = build_schedule(random_line, 720, DurationMode.RANDOM_PER_JOB, seed=12345)
    assert implicit == explicit
