from __future__ import annotations

import logging

from church_admin.bulk.coordinator import BulkCoordinator
from church_admin.core.exceptions import NotFoundError, ValidationError


def test_failures_do_not_stop_the_batch():
    seen = []

    def op(item):
        seen.append(item)
        if item == 2:
            raise ValidationError("bad item")
        if item == 4:
            raise NotFoundError("gone")
        return item * 10

    outcome = BulkCoordinator().run([1, 2, 3, 4, 5], op)

    assert seen == [1, 2, 3, 4, 5]
    assert outcome.succeeded == [10, 30, 50]
    assert [(f.item, f.code, f.error) for f in outcome.failed] == [
        (2, "validation_error", "bad item"),
        (4, "not_found", "gone"),
    ]
    assert outcome.success_count == 3
    assert outcome.failure_count == 2
    assert not outcome.all_succeeded


def test_unexpected_errors_are_captured_and_logged(caplog):
    def op(item):
        raise RuntimeError("db down")

    with caplog.at_level(logging.ERROR, logger="church_admin.bulk.coordinator"):
        outcome = BulkCoordinator().run(["a"], op, label="demo")

    assert outcome.failed[0].code == "internal_error"
    assert outcome.failed[0].error == "db down"
    assert "demo: unexpected error" in caplog.text


def test_empty_batch():
    outcome = BulkCoordinator().run([], lambda item: item)
    assert outcome.all_succeeded
    assert outcome.to_dict() == {"succeeded": [], "failed": [], "successCount": 0, "failureCount": 0}


def test_to_dict_serializes_successes():
    outcome = BulkCoordinator().run(["x"], lambda item: {"id": item})
    assert outcome.to_dict(lambda v: v["id"])["succeeded"] == ["x"]
