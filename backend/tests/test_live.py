import asyncio
import logging

from hirelog.api.v1.live import _finish_sender
from hirelog.services.live import LiveQueryHub


def make_loader(store):
    return lambda db: list(store)


def test_subscribe_delivers_current_snapshot():
    hub = LiveQueryHub()
    received = []

    hub.subscribe(None, ("notes", 1), make_loader(["a"]), received.append)

    assert received == [["a"]]


def test_publish_sends_full_snapshot_to_every_subscriber_of_key():
    hub = LiveQueryHub()
    store = ["a"]
    first, second, other = [], [], []
    hub.subscribe(None, ("notes", 1), make_loader(store), first.append)
    hub.subscribe(None, ("notes", 1), make_loader(store), second.append)
    hub.subscribe(None, ("notes", 2), make_loader([]), other.append)

    store.append("b")
    hub.publish(None, ("notes", 1))

    assert first[-1] == ["a", "b"]
    assert second[-1] == ["a", "b"]
    assert other == [[]]


def test_cancel_is_immediate_and_idempotent():
    hub = LiveQueryHub()
    received = []
    subscription = hub.subscribe(None, "key", make_loader([1]), received.append)

    subscription.cancel()
    subscription.cancel()
    hub.publish(None, "key")

    assert received == [[1]]
    assert hub.subscriber_count("key") == 0


def test_resubscribe_after_cancel_gets_fresh_snapshot():
    hub = LiveQueryHub()
    store = [1]
    hub.subscribe(None, "key", make_loader(store), lambda _: None).cancel()

    store.append(2)
    received = []
    hub.subscribe(None, "key", make_loader(store), received.append)

    assert received == [[1, 2]]


def test_failing_subscriber_does_not_block_others():
    hub = LiveQueryHub()
    received = []

    def broken(snapshot):
        raise RuntimeError("view crashed")

    hub.subscribe(None, "key", make_loader([]), broken)
    hub.subscribe(None, "key", make_loader([]), received.append)
    hub.publish(None, "key")

    assert received == [[], []]



def test_failed_socket_sender_is_collected_and_logged(caplog):
    async def scenario():
        async def broken_send():
            raise RuntimeError("client went away")

        sender = asyncio.create_task(broken_send())
        await asyncio.sleep(0)
        await _finish_sender(sender)
        return sender

    with caplog.at_level(logging.ERROR, logger="live"):
        sender = asyncio.run(scenario())

    assert sender.done()
    assert "Live socket sender failed" in caplog.text


def test_running_socket_sender_is_cancelled_quietly(caplog):
    async def scenario():
        sender = asyncio.create_task(asyncio.sleep(60))
        await asyncio.sleep(0)
        await _finish_sender(sender)
        return sender

    with caplog.at_level(logging.ERROR, logger="live"):
        sender = asyncio.run(scenario())

    assert sender.cancelled()
    assert caplog.text == ""
