"""Unit tests for Dispatcher — resolution, wildcard fan-out and failure isolation."""

from __future__ import annotations

import logging

import pytest

from datasignals.config import SignalsConfig
from datasignals.core.dispatcher import DEFAULT_MAX_TARGET_DEPTH, Dispatcher
from datasignals.core.errors import (
    InvalidDataType,
    InvalidGroupName,
    InvalidScope,
    InvalidSender,
    InvalidSignal,
    InvalidTarget,
)
from datasignals.core.hub import SignalHub
from datasignals.host import Chip
from datasignals.models.signals import DEFAULT_SIGNAL, Angle, Vector


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class TestSendValidation:
    def test_default_is_not_sendable(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen(DEFAULT_SIGNAL, chip, rec)
        with pytest.raises(InvalidSignal):
            hub.send(chip, DEFAULT_SIGNAL, 1, sender)
        assert rec.calls == []

    @pytest.mark.parametrize("signal", ["", "x" * 21, "two words", None, 5])
    def test_invalid_signal(self, hub: SignalHub, make_chip, sender, signal):
        with pytest.raises(InvalidSignal):
            hub.send(make_chip(), signal, 1, sender)

    def test_invalid_data_makes_no_calls(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        with pytest.raises(InvalidDataType):
            hub.send(chip, "PING", {"not": "allowed"}, sender)
        assert rec.calls == []

    def test_absent_sender(self, hub: SignalHub, make_chip):
        with pytest.raises(InvalidSender):
            hub.send(make_chip(), "PING", 1, None)

    def test_removed_sender(self, hub: SignalHub, make_chip):
        sender = make_chip()
        sender.remove()
        with pytest.raises(InvalidSender):
            hub.send(make_chip(), "PING", 1, sender)

    def test_actor_class_as_sender(self, hub: SignalHub, make_chip):
        with pytest.raises(InvalidSender):
            hub.send(make_chip(), "PING", 1, Chip)

    def test_actor_with_unknown_kind_as_data(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        payload = make_chip()
        payload.actor_kind = "vehicle"
        with pytest.raises(InvalidDataType, match="vehicle"):
            hub.send(chip, "PING", payload, sender)
        assert rec.calls == []

    def test_invalid_target(self, hub: SignalHub, sender):
        with pytest.raises(InvalidTarget):
            hub.send(42, "PING", 1, sender)

    def test_invalid_nested_target_delivers_nothing(
        self, hub: SignalHub, make_chip, sender, make_recorder
    ):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        with pytest.raises(InvalidTarget):
            hub.send([chip, [None]], "PING", 1, sender)
        assert rec.calls == []

    def test_malformed_group_in_collection(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        with pytest.raises(InvalidGroupName):
            hub.send([chip, "bad group"], "PING", 1, sender)
        with pytest.raises(InvalidScope):
            hub.send([chip, "team:everyone"], "PING", 1, sender)
        assert rec.calls == []

    def test_signal_checked_first(self, hub: SignalHub):
        with pytest.raises(InvalidSignal):
            hub.send(None, "$default", object(), None)

    def test_data_checked_before_sender(self, hub: SignalHub):
        with pytest.raises(InvalidDataType):
            hub.send(None, "PING", object(), None)


# ---------------------------------------------------------------------------
# Delivery
# ---------------------------------------------------------------------------


class TestDelivery:
    def test_single_actor(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        assert hub.send(chip, "PING", 7, sender) == 0
        assert rec.calls == [("PING", 7, sender)]

    def test_other_signals_not_delivered(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        hub.send(chip, "PONG", 7, sender)
        assert rec.calls == []

    @pytest.mark.parametrize(
        "data", [None, True, 0, 2.5, "text", Angle(pitch=1), Vector(x=1)]
    )
    def test_every_value_kind_delivered(self, hub: SignalHub, make_chip, sender, make_recorder, data):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        hub.send(chip, "PING", data, sender)
        assert rec.calls == [("PING", data, sender)]

    def test_actor_payload(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, payload, rec = make_chip(), make_chip("bob"), make_recorder()
        hub.listen("PING", chip, rec)
        hub.send(chip, "PING", payload, sender)
        assert rec.calls[0][1] is payload

    def test_actor_without_listeners_is_skipped(self, hub: SignalHub, make_chip, sender):
        report = hub.send_report(make_chip(), "PING", 1, sender)
        assert report.recipients == 1
        assert report.invocations == 0
        assert report.error_count == 0

    def test_wildcard_receives_everything(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, specific, wildcard = make_chip(), make_recorder(), make_recorder()
        hub.listen("PING", chip, specific)
        hub.listen(DEFAULT_SIGNAL, chip, wildcard)
        hub.send(chip, "PING", 1, sender)
        hub.send(chip, "PONG", 2, sender)
        assert specific.signals == ["PING"]
        assert wildcard.signals == ["PING", "PONG"]

    def test_listen_twice_delivers_once(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        hub.listen("PING", chip, rec)
        hub.send(chip, "PING", 1, sender)
        assert len(rec.calls) == 1

    def test_ignored_listener_not_called(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        hub.ignore("PING", chip, rec)
        hub.send(chip, "PING", 1, sender)
        assert rec.calls == []

    def test_removed_recipient_still_delivered(self, hub: SignalHub, make_chip, sender, make_recorder):
        chip, rec = make_chip(), make_recorder()
        hub.listen("PING", chip, rec)
        chip.remove()
        hub.send(chip, "PING", 1, sender)
        assert len(rec.calls) == 1


# ---------------------------------------------------------------------------
# Groups and collections
# ---------------------------------------------------------------------------


class TestResolution:
    def test_private_group_of_sender(self, hub: SignalHub, make_chip, sender, make_recorder):
        a, b = make_chip("alice"), make_chip("alice")
        ra, rb = make_recorder(), make_recorder()
        hub.join("team", a)
        hub.join("team", b)
        hub.listen("PING", a, ra)
        hub.listen("PING", b, rb)
        assert hub.send("team", "PING", 1, sender) == 0
        assert len(ra.calls) == len(rb.calls) == 1

    def test_cross_owner_private_isolation(self, hub: SignalHub, make_chip, make_recorder):
        alice_chip, rec = make_chip("alice"), make_recorder()
        hub.join("teamX", alice_chip)
        hub.listen("PING", alice_chip, rec)

        bob_sender = make_chip("bob")
        report = hub.send_report("teamX", "PING", 1, bob_sender)
        assert report.recipients == 0
        assert rec.calls == []

        bob_member, bob_rec = make_chip("bob"), make_recorder()
        hub.join("teamX", bob_member)
        hub.listen("PING", bob_member, bob_rec)
        hub.send("teamX:private", "PING", 1, bob_sender)
        assert rec.calls == []
        assert len(bob_rec.calls) == 1

    def test_public_group_any_sender(self, hub: SignalHub, make_chip, make_recorder):
        member, rec = make_chip("alice"), make_recorder()
        hub.join("lobby:public", member)
        hub.listen("PING", member, rec)
        hub.send("lobby:public", "PING", 1, make_chip("bob"))
        hub.send("lobby:public", "PING", 2, make_chip("carol"))
        assert [c[1] for c in rec.calls] == [1, 2]

    def test_private_name_does_not_reach_public(self, hub: SignalHub, make_chip, sender, make_recorder):
        member, rec = make_chip("alice"), make_recorder()
        hub.join("lobby:public", member)
        hub.listen("PING", member, rec)
        hub.send("lobby", "PING", 1, sender)
        assert rec.calls == []

    def test_unknown_group_is_empty(self, hub: SignalHub, sender):
        assert hub.send("nobody_here", "PING", 1, sender) == 0

    def test_nested_collection(self, hub: SignalHub, make_chip, sender, make_recorder):
        a, c = make_chip(), make_chip()
        g1, g2 = make_chip("bob"), make_chip("carol")
        hub.join("groupB:public", g1)
        hub.join("groupB:public", g2)
        recs = {chip: make_recorder() for chip in (a, c, g1, g2)}
        for chip, rec in recs.items():
            hub.listen("PING", chip, rec)

        report = hub.send_report([a, "groupB:public", [c]], "PING", 1, sender)

        assert report.recipients == 4
        assert report.error_count == 0
        assert all(len(rec.calls) == 1 for rec in recs.values())

    def test_tuple_collection(self, hub: SignalHub, make_chip, sender, make_recorder):
        a, rec = make_chip(), make_recorder()
        hub.listen("PING", a, rec)
        hub.send((a,), "PING", 1, sender)
        assert len(rec.calls) == 1

    def test_empty_collection(self, hub: SignalHub, sender):
        assert hub.send([], "PING", 1, sender) == 0

    def test_recipient_reached_twice_delivered_once(
        self, hub: SignalHub, make_chip, sender, make_recorder
    ):
        a, rec = make_chip("alice"), make_recorder()
        hub.join("team", a)
        hub.join("team:public", a)
        hub.listen("PING", a, rec)
        report = hub.send_report([a, "team", ["team:public", a]], "PING", 1, sender)
        assert report.recipients == 1
        assert len(rec.calls) == 1

    def test_resolution_order(self, dispatcher: Dispatcher, groups, make_chip, sender):
        a, b, c, d = (make_chip() for _ in range(4))
        groups.join("team", b)
        groups.join("team", c)
        assert dispatcher.resolve([a, ["team", [d]], c], sender) == [a, b, c, d]

    def test_default_depth_matches_config(self):
        assert DEFAULT_MAX_TARGET_DEPTH == SignalsConfig().max_target_depth

    def test_depth_limit(self, groups, listeners, make_chip, sender):
        dispatcher = Dispatcher(groups, listeners, SignalsConfig(max_target_depth=2))
        chip = make_chip()
        assert dispatcher.send([[chip]], "PING", 1, sender) == 0
        with pytest.raises(InvalidTarget, match="nested deeper"):
            dispatcher.send([[[chip]]], "PING", 1, sender)


# ---------------------------------------------------------------------------
# Failure isolation
# ---------------------------------------------------------------------------


class TestFailureIsolation:
    def test_middle_listener_fails(self, hub: SignalHub, make_chip, sender, make_recorder, make_exploding):
        chip = make_chip()
        first, broken, third = make_recorder("first"), make_exploding(), make_recorder("third")
        hub.listen("PING", chip, first)
        hub.listen("PING", chip, broken)
        hub.listen("PING", chip, third)

        assert hub.send(chip, "PING", 1, sender) == 1
        assert len(first.calls) == 1
        assert broken.calls == 1
        assert len(third.calls) == 1

    def test_errors_summed_across_recipients(
        self, hub: SignalHub, make_chip, sender, make_recorder, make_exploding
    ):
        a, b, c = make_chip(), make_chip(), make_chip()
        hub.join("team", b)
        hub.listen("PING", a, make_exploding())
        hub.listen("PING", b, make_exploding(ValueError))
        hub.listen(DEFAULT_SIGNAL, b, make_exploding(KeyError))
        ok = make_recorder()
        hub.listen("PING", c, ok)

        assert hub.send([a, "team", [c]], "PING", 1, sender) == 3
        assert len(ok.calls) == 1

    def test_report_describes_failures(self, hub: SignalHub, make_chip, sender, make_exploding):
        chip = make_chip(name="target")
        hub.listen("PING", chip, make_exploding(ValueError))
        report = hub.send_report(chip, "PING", 1, sender)
        assert not report.ok
        failure = report.failures[0]
        assert failure.signal == "PING"
        assert failure.error_type == "ValueError"
        assert "exploded" in failure.error
        assert "target" in failure.recipient

    def test_failures_logged(self, hub: SignalHub, make_chip, sender, make_exploding, caplog):
        chip = make_chip()
        hub.listen("PING", chip, make_exploding())
        with caplog.at_level(logging.ERROR, logger="datasignals.core.dispatcher"):
            hub.send(chip, "PING", 1, sender)
        assert any("failed for signal PING" in r.getMessage() for r in caplog.records)

    def test_failure_logging_can_be_silenced(self, make_chip, sender, make_exploding, caplog):
        hub = SignalHub(SignalsConfig(log_delivery_failures=False))
        chip = make_chip()
        hub.listen("PING", chip, make_exploding())
        with caplog.at_level(logging.ERROR, logger="datasignals.core.dispatcher"):
            assert hub.send(chip, "PING", 1, sender) == 1
        assert not [r for r in caplog.records if r.levelno >= logging.ERROR]
