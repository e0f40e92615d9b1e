"""Tests for the per-key lock registry."""

import threading
import time

from storefront.shared.locks import KeyedLock


class TestKeyedLock:
    def test_lock_is_dropped_after_use(self):
        locks = KeyedLock()
        with locks.hold("user-1"):
            assert len(locks) == 1
        assert len(locks) == 0

    def test_same_key_is_serialized(self):
        locks = KeyedLock()
        active = []
        overlaps = []

        def worker():
            with locks.hold("user-1"):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert overlaps == []
        assert len(locks) == 0

    def test_different_keys_do_not_block(self):
        locks = KeyedLock()
        with locks.hold("user-1"):
            acquired = threading.Event()

            def other():
                with locks.hold("user-2"):
                    acquired.set()

            t = threading.Thread(target=other)
            t.start()
            assert acquired.wait(timeout=1)
            t.join()

    def test_released_when_body_raises(self):
        locks = KeyedLock()
        try:
            with locks.hold("user-1"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert len(locks) == 0
