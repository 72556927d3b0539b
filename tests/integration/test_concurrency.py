"""Concurrency tests: operations are serialized on the shared ledger state."""

from concurrent.futures import ThreadPoolExecutor

from loyalty_ledger.ledger import AlreadyBurnt, TokenLedger

ADMIN = "admin"


class TestSerializedOperations:
    """Parallel callers never observe or produce inconsistent state."""

    def test_parallel_mints_get_distinct_ids(self, ledger: TokenLedger) -> None:
        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(lambda i: ledger.mint(ADMIN, f"user_{i}"), range(200)))

        assert sorted(ids) == list(range(1, 201))
        assert ledger.next_token_id == 201
        assert ledger.total_minted == 200
        assert ledger.balance_of("user_0") == 1

    def test_racing_burns_succeed_once(self, ledger: TokenLedger) -> None:
        ledger.mint(ADMIN, "user_a")

        def attempt(_: int) -> bool:
            try:
                ledger.burn(ADMIN, 1)
            except AlreadyBurnt:
                return False
            return True

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(attempt, range(32)))

        assert outcomes.count(True) == 1
        burned = [e for e in ledger.events.read_recent(100) if e["event_type"] == "burned"]
        assert len(burned) == 1
