"""Tests for signal normalization."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from pm_copilot.models import Provenance
from pm_copilot.normalize import (
    PROACTIVE_ID_PREFIX,
    REACTIVE_ID_PREFIX,
    build_search_text,
    feature_request_to_signal,
    ticket_to_signal,
    to_signals,
)
from pm_copilot.records import FeatureComment, FeatureRequestRecord, TicketRecord


class TestBuildSearchText:

    def test_lowercases_and_joins(self):
        assert build_search_text(["Calendar Broken", "It WON'T sync"]) == (
            "calendar broken it won't sync"
        )

    def test_skips_empty_parts(self):
        assert build_search_text(["a", "", "b"]) == "a b"

    def test_all_empty(self):
        assert build_search_text([]) == ""


class TestTicketToSignal:

    def test_reactive_signal(self):
        created = datetime(2026, 2, 1, tzinfo=timezone.utc)
        ticket = TicketRecord(
            id="123",
            subject="Booking Calendar Down",
            preview="Page shows an error",
            customer_messages=["Clients cannot BOOK"],
            tags=["escalation"],
            thread_count=3,
            created_at=created,
        )
        signal = ticket_to_signal(ticket)

        assert signal.id == f"{REACTIVE_ID_PREFIX}123"
        assert signal.provenance == Provenance.REACTIVE
        assert signal.title == "Booking Calendar Down"
        assert signal.text == "booking calendar down page shows an error clients cannot book"
        assert signal.created_at == created
        assert signal.attributes.tags == ["escalation"]
        assert signal.attributes.thread_count == 3
        assert signal.attributes.votes == 0

    def test_each_field_once(self):
        ticket = TicketRecord(id="1", subject="alpha", preview="beta", customer_messages=["gamma"])
        text = ticket_to_signal(ticket).text
        for word in ("alpha", "beta", "gamma"):
            assert text.count(word) == 1

    def test_sparse_ticket(self):
        signal = ticket_to_signal(TicketRecord(id="7"))
        assert signal.title == ""
        assert signal.text == ""
        assert signal.created_at is None
        assert signal.attributes.thread_count == 0


class TestFeatureRequestToSignal:

    def test_proactive_signal(self):
        request = FeatureRequestRecord(
            id="abc",
            title="Calendar Sync",
            description="Two-way Google sync",
            votes_count=40,
            comments_count=2,
            portal="tidycal",
            comments=[
                FeatureComment(comment="Need THIS"),
                FeatureComment(comment="+1"),
            ],
        )
        signal = feature_request_to_signal(request)

        assert signal.id == f"{PROACTIVE_ID_PREFIX}abc"
        assert signal.provenance == Provenance.PROACTIVE
        assert signal.title == "Calendar Sync"
        assert signal.text == "calendar sync two-way google sync need this +1"
        assert signal.attributes.votes == 40
        assert signal.attributes.comments_count == 2
        assert signal.attributes.portal == "tidycal"

    def test_sparse_request(self):
        signal = feature_request_to_signal(FeatureRequestRecord(id="z"))
        assert signal.text == ""
        assert signal.attributes.votes == 0
        assert signal.attributes.portal is None


class TestToSignals:

    def test_ids_never_collide(self):
        """Same upstream id from both sources yields distinct signal ids."""
        signals = to_signals([TicketRecord(id="1")], [FeatureRequestRecord(id="1")])
        assert [s.id for s in signals] == ["hs-1", "pl-1"]

    def test_reactive_first_in_input_order(self):
        signals = to_signals(
            [TicketRecord(id="b"), TicketRecord(id="a")],
            [FeatureRequestRecord(id="c")],
        )
        assert [s.id for s in signals] == ["hs-b", "hs-a", "pl-c"]

    def test_provenance_is_immutable(self):
        signal = ticket_to_signal(TicketRecord(id="1"))
        with pytest.raises(ValidationError):
            signal.provenance = Provenance.PROACTIVE
