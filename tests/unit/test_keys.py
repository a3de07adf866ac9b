"""
Unit tests for lock key derivation.
"""

import os
import subprocess
import sys
from enum import Enum
from pathlib import Path

from job_lock.lock.keys import normalize_arg, resolve_lock_key


class Mode(Enum):
    FULL = "full"
    PARTIAL = "partial"


class TestNormalizeArg:
    """Tests for normalize_arg."""

    def test_enum_becomes_value_string(self):
        assert normalize_arg(Mode.FULL) == "full"

    def test_int_enum_value_becomes_string(self):
        class Level(Enum):
            HIGH = 3

        assert normalize_arg(Level.HIGH) == "3"

    def test_nested_containers(self):
        value = {"mode": Mode.PARTIAL, "ids": (1, Mode.FULL)}

        assert normalize_arg(value) == {"mode": "partial", "ids": [1, "full"]}

    def test_plain_values_unchanged(self):
        assert normalize_arg("full") == "full"
        assert normalize_arg(42) == 42
        assert normalize_arg(None) is None


class TestResolveLockKey:
    """Tests for resolve_lock_key."""

    def test_default_format(self):
        key = resolve_lock_key("update_graph", (42, "full"))

        assert key == 'lock:update_graph-[42,"full"]'

    def test_no_arguments(self):
        assert resolve_lock_key("nightly_report", ()) == "lock:nightly_report-[]"

    def test_deterministic(self):
        args = (1, {"b": 2, "a": [3, 4]})

        assert resolve_lock_key("job", args) == resolve_lock_key("job", args)

    def test_mapping_order_does_not_matter(self):
        first = resolve_lock_key("job", ({"a": 1, "b": 2},))
        second = resolve_lock_key("job", ({"b": 2, "a": 1},))

        assert first == second

    def test_enum_and_string_collide(self):
        assert resolve_lock_key("job", (Mode.FULL,)) == resolve_lock_key("job", ("full",))

    def test_different_arguments_differ(self):
        assert resolve_lock_key("job", (1,)) != resolve_lock_key("job", (2,))
        assert resolve_lock_key("job", (1,)) != resolve_lock_key("job", ("1",))
        assert resolve_lock_key("job", (1, 2)) != resolve_lock_key("job", (2, 1))

    def test_different_job_types_differ(self):
        assert resolve_lock_key("job_a", (1,)) != resolve_lock_key("job_b", (1,))

    def test_kwargs_are_a_separate_segment(self):
        key = resolve_lock_key("job", (1,), {"force": True})

        assert key == 'lock:job-[1]-{"force":true}'
        assert key != resolve_lock_key("job", (1,))

    def test_empty_kwargs_keep_plain_format(self):
        assert resolve_lock_key("job", (1,), {}) == resolve_lock_key("job", (1,))

    def test_custom_prefix(self):
        assert resolve_lock_key("job", (1,), prefix="locks:") == "locks:job-[1]"

    def test_non_json_values_use_str(self):
        class Repo:
            def __str__(self) -> str:
                return "repo-7"

        assert resolve_lock_key("job", (Repo(),)) == 'lock:job-["repo-7"]'

    def test_trailing_dict_differs_from_kwargs(self):
        positional = resolve_lock_key("job", (1, {"force": True}))
        keyword = resolve_lock_key("job", (1,), {"force": True})

        assert positional != keyword

    def test_mapping_keys_match_json_payload(self):
        """Integer keys arrive as strings after a JSON round trip."""
        assert resolve_lock_key("job", ({1: "x"},)) == resolve_lock_key("job", ({"1": "x"},))

    def test_set_order_is_canonical(self):
        assert resolve_lock_key("job", ({"beta", "alpha", 3},)) == 'lock:job-[["alpha","beta",3]]'
        assert resolve_lock_key("job", (frozenset({2, 1}),)) == "lock:job-[[1,2]]"

    def test_same_key_across_hash_seeds(self):
        """Worker processes with different hash seeds must agree on the key."""
        code = (
            "from job_lock.lock.keys import resolve_lock_key; "
            "print(resolve_lock_key('job', ({'alpha', 'beta', 'gamma', 'delta'}, {'x': {'y', 'z'}})))"
        )
        root = Path(__file__).resolve().parents[2]

        keys = set()
        for seed in ("1", "2", "3", "4", "5"):
            env = {**os.environ, "PYTHONHASHSEED": seed}
            env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(root), env.get("PYTHONPATH")]))
            result = subprocess.run(
                [sys.executable, "-c", code],
                capture_output=True,
                text=True,
                env=env,
                check=True,
            )
            keys.add(result.stdout.strip())

        assert keys == {'lock:job-[["alpha","beta","delta","gamma"],{"x":["y","z"]}]'}
