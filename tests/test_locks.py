import threading
import time

from utils.locks import KeyedLock


def test_same_key_is_serialized():
    locks = KeyedLock()
    counter = {"value": 0}

    def bump():
        with locks.hold((1, 1)):
            current = counter["value"]
            time.sleep(0.001)
            counter["value"] = current + 1

    threads = [threading.Thread(target=bump) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert counter["value"] == 20
    assert len(locks) == 0


def test_different_keys_do_not_block_each_other():
    locks = KeyedLock()
    entered = threading.Event()

    def hold_other():
        with locks.hold((2, 2)):
            entered.set()

    with locks.hold((1, 1)):
        t = threading.Thread(target=hold_other)
        t.start()
        assert entered.wait(timeout=1)
        t.join()
