from firebase_kit.composer import (
    FIREBASE_SERVICES,
    compose_apis,
    compose_labels,
    unique,
)


def test_unique_keeps_first_occurrence_order() -> None:
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
    assert unique([]) == []


def test_compose_apis_empty_input_returns_baseline() -> None:
    assert compose_apis([]) == list(FIREBASE_SERVICES)
    assert compose_apis(None) == list(FIREBASE_SERVICES)


def test_compose_apis_requested_first_then_baseline() -> None:
    apis = compose_apis(["run.googleapis.com", "custom.api.com"])

    assert apis[:4] == [
        "run.googleapis.com",
        "custom.api.com",
        "cloudbilling.googleapis.com",
        "cloudresourcemanager.googleapis.com",
    ]
    assert apis.count("run.googleapis.com") == 1
    assert len(apis) == len(FIREBASE_SERVICES) + 1


def test_compose_apis_removes_duplicates_in_request() -> None:
    requested = ["a.googleapis.com", "b.googleapis.com", "a.googleapis.com"]

    apis = compose_apis(requested)

    assert apis[:2] == ["a.googleapis.com", "b.googleapis.com"]
    assert len(apis) == len(set(apis))
    assert set(FIREBASE_SERVICES) <= set(apis)
    # 입력은 그대로
    assert requested == ["a.googleapis.com", "b.googleapis.com", "a.googleapis.com"]


def test_compose_apis_is_idempotent() -> None:
    once = compose_apis(["x.googleapis.com", "storage.googleapis.com"])

    assert compose_apis(once) == once


def test_baseline_has_no_duplicates() -> None:
    assert len(FIREBASE_SERVICES) == len(set(FIREBASE_SERVICES))


def test_compose_labels_adds_marker_when_absent() -> None:
    assert compose_labels({"team": "infra"}) == {"team": "infra", "firebase": "enabled"}
    assert compose_labels(None) == {"firebase": "enabled"}
    assert compose_labels({}) == {"firebase": "enabled"}


def test_compose_labels_overrides_other_value() -> None:
    assert compose_labels({"firebase": "disabled"}) == {"firebase": "enabled"}


def test_compose_labels_keeps_existing_marker_and_other_keys() -> None:
    labels = {"firebase": "enabled", "env": "prod"}

    assert compose_labels(labels) == {"firebase": "enabled", "env": "prod"}


def test_compose_labels_does_not_mutate_input() -> None:
    labels = {"firebase": "off", "team": "infra"}

    result = compose_labels(labels)

    assert result is not labels
    assert labels == {"firebase": "off", "team": "infra"}
