"""Unit tests for waypoint ordering."""

import pytest

from ridematch.domain.sequencing import (
    DROP,
    EXISTING,
    NEW,
    PICKUP,
    ExhaustiveSequencer,
    HeuristicSequencer,
    describe_route,
    make_sequencer,
    route_length_km,
)
from tests.conftest import DROP as TRIP_DROP
from tests.conftest import PICKUP as TRIP_PICKUP
from tests.conftest import east_of, north_of


def _labels(order):
    return [(w.passenger, w.kind) for w in order]


class TestHeuristicSequencer:
    def setup_method(self):
        self.sequencer = HeuristicSequencer()

    def test_close_pickups_and_drops_are_sequential(self, make_request, make_existing):
        request = make_request(
            pickup=north_of(TRIP_PICKUP, 0.5), destination=north_of(TRIP_DROP, 0.5)
        )
        order = self.sequencer.sequence(make_existing(), request)
        assert _labels(order) == [
            (EXISTING, PICKUP), (NEW, PICKUP), (EXISTING, DROP), (NEW, DROP),
        ]

    def test_far_drop_drops_new_rider_first(self, make_request, make_existing):
        request = make_request(
            pickup=north_of(TRIP_PICKUP, 0.5), destination=north_of(TRIP_PICKUP, 3.0)
        )
        order = self.sequencer.sequence(make_existing(), request)
        assert _labels(order) == [
            (EXISTING, PICKUP), (NEW, PICKUP), (NEW, DROP), (EXISTING, DROP),
        ]

    def test_pickup_on_the_way_is_accepted(self, make_request, make_existing):
        midpoint = (
            (TRIP_PICKUP[0] + TRIP_DROP[0]) / 2,
            (TRIP_PICKUP[1] + TRIP_DROP[1]) / 2,
        )
        order = self.sequencer.sequence(
            make_existing(), make_request(pickup=midpoint, destination=TRIP_DROP)
        )
        assert _labels(order) == [
            (EXISTING, PICKUP), (NEW, PICKUP), (EXISTING, DROP), (NEW, DROP),
        ]

    def test_pickup_off_route_is_infeasible(self, make_request, make_existing):
        request = make_request(pickup=east_of(TRIP_PICKUP, 20), destination=TRIP_DROP)
        assert self.sequencer.sequence(make_existing(), request) is None


class TestExhaustiveSequencer:
    def test_every_rider_picked_up_before_drop(self, make_request, make_existing):
        request = make_request(pickup=east_of(TRIP_PICKUP, 20), destination=TRIP_DROP)
        order = ExhaustiveSequencer().sequence(make_existing(), request)
        assert order is not None
        labels = _labels(order)
        for rider in (EXISTING, NEW):
            assert labels.index((rider, PICKUP)) < labels.index((rider, DROP))

    def test_never_longer_than_heuristic(self, make_request, make_existing):
        request = make_request(
            pickup=north_of(TRIP_PICKUP, 0.5), destination=north_of(TRIP_PICKUP, 3.0)
        )
        existing = make_existing()
        heuristic = HeuristicSequencer().sequence(existing, request)
        exhaustive = ExhaustiveSequencer().sequence(existing, request)
        assert route_length_km(exhaustive) <= route_length_km(heuristic) + 1e-9


class TestHelpers:
    def test_describe_route_names_intermediate_stops(self, make_request, make_existing):
        order = HeuristicSequencer().sequence(make_existing(), make_request())
        assert describe_route(order) == "Via New pickup, Existing drop"

    def test_make_sequencer(self):
        assert isinstance(make_sequencer("heuristic"), HeuristicSequencer)
        assert isinstance(make_sequencer("exhaustive"), ExhaustiveSequencer)
        with pytest.raises(ValueError):
            make_sequencer("genetic")
