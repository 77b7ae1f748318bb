import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from workflow_engine.errors import WorkflowError
from workflow_engine.execution import RunStatus
from workflow_engine.execution.run_state import RunDataStore


class TestRunDataStore:

    def setup_method(self):
        self.store = RunDataStore()

    def test_entries_are_write_once(self):
        self.store.set("a", 1)
        with pytest.raises(WorkflowError) as exc_info:
            self.store.set("a", 2)
        assert exc_info.value.node_id == "a"
        assert self.store.get("a") == 1

    def test_clear_makes_ids_writable_again(self):
        self.store.set("a", 1)
        self.store.record("a", {}, 1)
        self.store.clear()

        assert "a" not in self.store
        assert len(self.store) == 0
        assert self.store.history == []

        self.store.set("a", 2)
        assert self.store.get("a") == 2

    def test_history_keeps_order(self):
        for node_id in ("x", "y", "z"):
            self.store.set(node_id, node_id.upper())
            self.store.record(node_id, {"default": None}, node_id.upper())
        assert [entry.node_id for entry in self.store.history] == ["x", "y", "z"]
        assert list(self.store) == ["x", "y", "z"]

    def test_snapshot_and_history_are_copies(self):
        self.store.set("a", {"items": [1]})
        self.store.record("a", {}, {"items": [1]})

        snapshot = self.store.snapshot()
        snapshot["a"]["items"].append(2)
        self.store.history[0].output["items"].append(2)

        assert self.store.get("a") == {"items": [1]}
        assert self.store.history[0].output == {"items": [1]}

    def test_status_values(self):
        assert RunStatus("stopped") is RunStatus.STOPPED
        assert RunStatus.COMPLETED.value == "completed"
