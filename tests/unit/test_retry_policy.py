from claim_ingest.content.models import RetryPolicy


class TestDelays:
    def test_default_schedule(self) -> None:
        assert list(RetryPolicy().delays()) == [5.0, 7.5, 11.25, 16.875]

    def test_one_fewer_delay_than_rounds(self) -> None:
        assert len(list(RetryPolicy(max_rounds=3).delays())) == 2

    def test_single_round_has_no_delays(self) -> None:
        assert list(RetryPolicy(max_rounds=1).delays()) == []

    def test_capped_at_max_delay(self) -> None:
        policy = RetryPolicy(max_rounds=5, base_delay_seconds=10, backoff_factor=3, max_delay_seconds=40)
        assert list(policy.delays()) == [10, 30, 40, 40]

    def test_base_above_max_is_capped(self) -> None:
        policy = RetryPolicy(max_rounds=3, base_delay_seconds=90, max_delay_seconds=60)
        assert list(policy.delays()) == [60, 60]

    def test_never_decreasing_with_factor_below_one(self) -> None:
        policy = RetryPolicy(max_rounds=4, base_delay_seconds=8, backoff_factor=0.5)
        delays = list(policy.delays())
        assert delays == sorted(delays)


class TestAsDict:
    def test_contains_all_fields(self) -> None:
        assert RetryPolicy().as_dict() == {
            "max_rounds": 5,
            "base_delay_seconds": 5.0,
            "backoff_factor": 1.5,
            "max_delay_seconds": 60.0,
            "propagation_grace_seconds": 30.0,
        }
