from __future__ import annotations

import copy

import pytest

from src.relay.errors import SplitError
from src.relay.services.splitter import split_alerts


def test_example_payload_splits_into_firing_then_resolved():
    payload = {
        "status": "x",
        "alerts": [{"status": "firing", "a": 1}, {"status": "resolved", "b": 2}],
        "groupLabels": {"g": "1"},
    }

    groups = split_alerts(payload)

    assert groups == [
        {"status": "firing", "groupLabels": {"g": "1"}, "alerts": [{"status": "firing", "a": 1}]},
        {"status": "resolved", "groupLabels": {"g": "1"}, "alerts": [{"status": "resolved", "b": 2}]},
    ]
    assert list(groups[0]) == ["status", "groupLabels", "alerts"]


def test_no_alert_lost_and_bucket_order_preserved():
    alerts = [
        {"status": "resolved", "n": 1},
        {"status": "firing", "n": 2},
        {"status": "firing", "n": 3},
        {"status": "resolved", "n": 4},
        {"status": "firing", "n": 5},
    ]
    groups = split_alerts({"alerts": alerts})

    firing, resolved = groups
    assert [a["n"] for a in firing["alerts"]] == [2, 3, 5]
    assert [a["n"] for a in resolved["alerts"]] == [1, 4]
    assert sorted(a["n"] for g in groups for a in g["alerts"]) == [1, 2, 3, 4, 5]


@pytest.mark.parametrize("status,missing", [("firing", "resolved"), ("resolved", "firing")])
def test_single_bucket_only(status: str, missing: str):
    groups = split_alerts({"status": status, "alerts": [{"status": status}, {"status": status}]})
    assert len(groups) == 1
    assert groups[0]["status"] == status
    assert all(g["status"] != missing for g in groups)


def test_empty_buckets_return_empty_list():
    assert split_alerts({"status": "firing", "alerts": []}) == []
    assert split_alerts({"alerts": [{"status": "pending"}, {"labels": {}}, "junk", 3, None]}) == []


def test_unknown_and_non_object_alerts_are_dropped():
    groups = split_alerts(
        {"alerts": [{"status": "firing", "id": 1}, {"status": "FIRING"}, ["firing"], {"status": ["firing"]}]}
    )
    assert groups == [{"status": "firing", "alerts": [{"status": "firing", "id": 1}]}]


@pytest.mark.parametrize("alerts", [None, "firing", {"status": "firing"}, 42])
def test_non_list_alerts_is_invalid_format(alerts):
    with pytest.raises(SplitError):
        split_alerts({"status": "firing", "alerts": alerts})


def test_missing_alerts_is_invalid_format():
    with pytest.raises(SplitError, match="invalid alerts format"):
        split_alerts({"status": "firing"})


def test_other_top_level_fields_copied_unmodified_and_input_untouched():
    payload = {
        "receiver": "relay",
        "status": "firing",
        "alerts": [{"status": "firing"}, {"status": "resolved"}],
        "groupLabels": {"alertname": "HighCPU"},
        "commonLabels": {"severity": "critical"},
        "externalURL": "http://alertmanager:9093",
        "version": "4",
        "truncatedAlerts": 0,
    }
    original = copy.deepcopy(payload)

    groups = split_alerts(payload)

    assert payload == original
    for group in groups:
        for key in ("receiver", "groupLabels", "commonLabels", "externalURL", "version", "truncatedAlerts"):
            assert group[key] == payload[key]


def test_status_appended_when_payload_has_none():
    groups = split_alerts({"receiver": "r", "alerts": [{"status": "resolved"}]})
    assert list(groups[0]) == ["receiver", "status", "alerts"]
    assert groups[0]["status"] == "resolved"
