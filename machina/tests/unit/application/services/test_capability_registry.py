"""
Unit tests for CapabilityRegistry detect-and-rank resolution.
"""

import asyncio
from pathlib import Path

import pytest

from machina.application.services.capability_registry import CapabilityRegistry, SeedContext
from machina.domain.model.capability.capability import CapabilityKind
from machina.domain.model.capability.exceptions import (
    CandidateLookupError,
    NoApplicableCandidateError,
    NoCandidatesError,
    SeedFailedError,
    SeedingUnsupportedError,
)
from machina.infrastructure.plugins.component_source import PluginComponentSource
from machina.tests.unit.fixtures.plugin_fixtures import (
    BrokenProbe,
    DetectOnly,
    FakeGuest,
    StaticRanker,
    SyncGuest,
    make_project,
)


def _source(**plugins) -> PluginComponentSource:
    """Register guest plugin instances in keyword order."""
    source = PluginComponentSource()
    for name, plugin in plugins.items():
        source.register(CapabilityKind.GUEST, name, lambda plugin=plugin: plugin)
    return source


@pytest.fixture
def owner(tmp_path: Path) -> SeedContext:
    return SeedContext(machine=object(), project=make_project(tmp_path))


@pytest.mark.unit
class TestCapabilityRegistryDetection:
    """Detection and ranking of candidates."""

    async def test_single_detector_wins_regardless_of_score(self, target, owner):
        """The only detecting candidate wins even with the lowest score."""
        source = _source(a=FakeGuest(detects=False), b=FakeGuest(), c=FakeGuest(detects=False))
        registry = CapabilityRegistry(source, StaticRanker({"a": 5, "b": 0, "c": 9}))

        winner = await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert winner.name == "b"

    async def test_highest_score_wins(self, target, owner):
        source = _source(linux=FakeGuest(), debian=FakeGuest(), ubuntu=FakeGuest())
        registry = CapabilityRegistry(
            source, StaticRanker({"linux": 0, "debian": 1, "ubuntu": 2})
        )

        winner = await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert winner.name == "ubuntu"

    async def test_tie_goes_to_first_listed_candidate(self, target, owner):
        """Equal scores resolve to the earliest candidate even when its probe finishes last."""
        source = _source(first=FakeGuest(delay=0.05), second=FakeGuest())
        registry = CapabilityRegistry(source, StaticRanker({"first": 1, "second": 1}))

        for _ in range(5):
            winner = await registry.resolve(CapabilityKind.GUEST, target, owner=owner)
            assert winner.name == "first"

    async def test_sort_candidates_breaks_ties_by_name(self, target, owner):
        source = _source(zeta=FakeGuest(), alpha=FakeGuest())
        registry = CapabilityRegistry(source, StaticRanker(), sort_candidates=True)

        winner = await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert winner.name == "alpha"

    async def test_probe_error_does_not_block_other_candidates(self, target, owner):
        source = _source(broken=BrokenProbe(), working=FakeGuest())
        registry = CapabilityRegistry(source, StaticRanker({"broken": 10}))

        winner = await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert winner.name == "working"

    async def test_timed_out_probe_is_skipped(self, target, owner):
        slow = FakeGuest(delay=1.0)
        source = _source(slow=slow, fast=FakeGuest())
        registry = CapabilityRegistry(
            source, StaticRanker({"slow": 3}), probe_timeout_seconds=0.05
        )

        winner = await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert winner.name == "fast"

    async def test_sync_probe_is_supported(self, target, owner):
        guest = SyncGuest()
        registry = CapabilityRegistry(_source(plain=guest), StaticRanker())

        winner = await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert winner.value is guest
        assert guest.detect_calls == 1

    async def test_only_detected_candidates_are_scored(self, target, owner):
        ranker = StaticRanker()
        source = _source(no=FakeGuest(detects=False), yes=FakeGuest())
        registry = CapabilityRegistry(source, ranker)

        await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert ranker.scored == ["yes"]

    async def test_ranker_error_skips_candidate(self, target, owner):
        source = _source(orphan=FakeGuest(), linux=FakeGuest())
        ranker = StaticRanker(errors={"orphan": CandidateLookupError("unknown parent")})
        registry = CapabilityRegistry(source, ranker)

        winner = await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert winner.name == "linux"

    async def test_probes_run_concurrently(self, target, owner):
        source = _source(a=FakeGuest(delay=0.2), b=FakeGuest(delay=0.2), c=FakeGuest(delay=0.2))
        registry = CapabilityRegistry(source, StaticRanker())

        loop = asyncio.get_running_loop()
        started = loop.time()
        await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert loop.time() - started < 0.5


@pytest.mark.unit
class TestCapabilityRegistryFailures:
    """Failure reporting of resolve()."""

    async def test_no_candidates(self, target, owner):
        registry = CapabilityRegistry(PluginComponentSource(), StaticRanker())

        with pytest.raises(NoCandidatesError) as exc_info:
            await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert exc_info.value.kind == "guest"
        assert exc_info.value.retryable is False

    async def test_no_applicable_candidate_reports_probe_errors(self, target, owner):
        source = _source(quiet=FakeGuest(detects=False), broken=BrokenProbe())
        registry = CapabilityRegistry(source, StaticRanker())

        with pytest.raises(NoApplicableCandidateError) as exc_info:
            await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        error = exc_info.value
        assert error.candidates == ["quiet", "broken"]
        assert error.probe_errors == {"broken": "probe exploded"}
        assert error.to_dict()["error_type"] == "NoApplicableCandidateError"

    async def test_listing_failure_is_wrapped(self, target, owner):
        source = PluginComponentSource()

        def failing_factory():
            raise OSError("plugin file missing")

        source.register(CapabilityKind.GUEST, "gone", failing_factory)
        registry = CapabilityRegistry(source, StaticRanker())

        with pytest.raises(CandidateLookupError):
            await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

    def test_rejects_non_positive_timeout(self):
        with pytest.raises(ValueError):
            CapabilityRegistry(PluginComponentSource(), StaticRanker(), probe_timeout_seconds=0)


@pytest.mark.unit
class TestCapabilityRegistrySeeding:
    """Seeding of the winning candidate."""

    async def test_winner_is_seeded_with_owner(self, target, owner):
        guest = FakeGuest()
        registry = CapabilityRegistry(_source(linux=guest), StaticRanker())

        await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert guest.seeded_with == [owner.machine]

    async def test_seed_failure(self, target, owner):
        guest = FakeGuest(seed_error=RuntimeError("bad guest"))
        registry = CapabilityRegistry(_source(linux=guest), StaticRanker())

        with pytest.raises(SeedFailedError) as exc_info:
            await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

        assert exc_info.value.candidate == "linux"
        assert "bad guest" in exc_info.value.reason

    async def test_seeded_kind_requires_seeder(self, target, owner):
        registry = CapabilityRegistry(_source(plain=DetectOnly()), StaticRanker())

        with pytest.raises(SeedingUnsupportedError):
            await registry.resolve(CapabilityKind.GUEST, target, owner=owner)

    async def test_unseeded_kind_accepts_plain_winner(self, target, owner):
        source = PluginComponentSource()
        source.register(CapabilityKind.COMMUNICATOR, "ssh", DetectOnly)
        registry = CapabilityRegistry(source, StaticRanker())

        winner = await registry.resolve(CapabilityKind.COMMUNICATOR, target, owner=owner)

        assert winner.name == "ssh"
        assert isinstance(winner.value, DetectOnly)

    async def test_seeder_without_owner_fails(self, target):
        registry = CapabilityRegistry(_source(linux=FakeGuest()), StaticRanker())

        with pytest.raises(SeedFailedError):
            await registry.resolve(CapabilityKind.GUEST, target)

    def test_seeded_kinds_are_parsed(self):
        registry = CapabilityRegistry(
            PluginComponentSource(), StaticRanker(), seeded_kinds=["Guest", "host"]
        )

        assert registry.seeded_kinds == {CapabilityKind.GUEST, CapabilityKind.HOST}
        assert registry.requires_seeding(CapabilityKind.HOST)
        assert not registry.requires_seeding(CapabilityKind.PROVIDER)
