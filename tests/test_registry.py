"""AccountRegistry: canonical instances and clamped risk."""

import threading

import pytest

from fraud_graph.registry import AccountRegistry, clamp


class TestGetOrCreate:

    def test_new_account_starts_at_zero(self):
        registry = AccountRegistry()
        account = registry.get_or_create("A")
        assert account.account_id == "A"
        assert account.risk == 0.0

    def test_same_id_returns_same_instance(self):
        registry = AccountRegistry()
        assert registry.get_or_create("A") is registry.get_or_create("A")
        assert len(registry) == 1

    def test_get_unknown_returns_none(self):
        registry = AccountRegistry()
        assert registry.get("nobody") is None
        assert "nobody" not in registry

    def test_concurrent_creation_yields_one_instance(self):
        registry = AccountRegistry()
        barrier = threading.Barrier(8)
        seen = []

        def worker():
            barrier.wait()
            seen.append(registry.get_or_create("shared"))

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 1
        assert all(a is seen[0] for a in seen)


class TestAdjustRisk:

    @pytest.mark.parametrize("deltas, expected", [
        ([0.2, 0.3], 0.5),
        ([5.0], 1.0),
        ([-3.0], 0.0),
        ([0.9, 0.9, -0.4], 0.6),
    ])
    def test_result_is_clamped(self, deltas, expected):
        registry = AccountRegistry()
        registry.get_or_create("A")
        for d in deltas:
            registry.adjust_risk("A", d)
        assert registry.get("A").risk == pytest.approx(expected)

    def test_returns_clamped_value(self):
        registry = AccountRegistry()
        assert registry.adjust_risk("A", 0.25) == pytest.approx(0.25)
        assert registry.adjust_risk("A", 5.0) == 1.0
        assert registry.adjust_risk("A", -9.0) == 0.0

    def test_unknown_id_is_created(self):
        registry = AccountRegistry()
        registry.adjust_risk("late", 0.1)
        assert registry.get("late").risk == pytest.approx(0.1)

    def test_concurrent_updates_are_not_lost(self):
        registry = AccountRegistry()
        registry.get_or_create("A")

        def worker():
            for _ in range(100):
                registry.adjust_risk("A", 0.001)

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert registry.get("A").risk == pytest.approx(0.5)

    def test_risk_cannot_be_assigned(self):
        account = AccountRegistry().get_or_create("A")
        with pytest.raises(AttributeError):
            account.risk = 0.7


def test_clamp_bounds():
    assert clamp(-0.1) == 0.0
    assert clamp(1.2) == 1.0
    assert clamp(0.4) == 0.4
