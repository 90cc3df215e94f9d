"""Unit tests for chirpy.core.rwlock: shared readers, exclusive writer."""

import threading
import time
import unittest

from chirpy.core.rwlock import ReadWriteLock


class TestReadWriteLock(unittest.TestCase):
    def test_readers_share(self) -> None:
        lock = ReadWriteLock()
        both_inside = threading.Barrier(2, timeout=5)
        errors: list[BaseException] = []

        def reader() -> None:
            try:
                with lock.read_locked():
                    both_inside.wait()
            except BaseException as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=reader) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)
        self.assertEqual(errors, [])

    def test_writer_excludes_readers(self) -> None:
        lock = ReadWriteLock()
        events: list[str] = []
        lock.acquire_write()

        def reader() -> None:
            with lock.read_locked():
                events.append("read")

        t = threading.Thread(target=reader)
        t.start()
        time.sleep(0.05)
        events.append("write-done")
        lock.release_write()
        t.join(timeout=5)
        self.assertEqual(events, ["write-done", "read"])

    def test_writers_serialize(self) -> None:
        lock = ReadWriteLock()
        counter = {"value": 0, "max_inside": 0, "inside": 0}

        def writer() -> None:
            for _ in range(50):
                with lock.write_locked():
                    counter["inside"] += 1
                    counter["max_inside"] = max(counter["max_inside"], counter["inside"])
                    counter["value"] += 1
                    counter["inside"] -= 1

        threads = [threading.Thread(target=writer) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=10)
        self.assertEqual(counter["value"], 400)
        self.assertEqual(counter["max_inside"], 1)

    def test_released_on_exception(self) -> None:
        lock = ReadWriteLock()
        with self.assertRaises(RuntimeError):
            with lock.write_locked():
                raise RuntimeError("boom")
        # Would block forever if the write lock leaked.
        with lock.read_locked():
            pass


if __name__ == "__main__":
    unittest.main()
