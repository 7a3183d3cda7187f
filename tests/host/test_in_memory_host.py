import io
import unittest

from permgate.bootstrap_capabilities import build_capability_registry
from permgate.core.capability_request import CapabilityState, GrantResult
from permgate.core.dispatcher import ResponseDispatcher
from permgate.core.errors import HostError
from permgate.host.in_memory import InMemoryHost
from permgate.host.platform import GrantStatus
from permgate.observers import ToastObserver


class TestInMemoryHost(unittest.TestCase):
    def test_answer_persists_grant_and_dispatches(self) -> None:
        dispatcher = ResponseDispatcher()
        seen = []
        dispatcher.register(lambda token, results: seen.append((token, list(results))))
        host = InMemoryHost(dispatcher=dispatcher)

        self.assertEqual(host.query_grant_status("camera"), GrantStatus.NOT_GRANTED)
        host.request_capabilities(["camera"], 5)
        self.assertEqual(host.unanswered_tokens(), [5])

        out = host.answer(5, True)
        self.assertEqual(out, [GrantResult("camera", True)])
        self.assertEqual(seen, [(5, [GrantResult("camera", True)])])
        self.assertEqual(host.query_grant_status("camera"), GrantStatus.GRANTED)
        self.assertEqual(host.unanswered_tokens(), [])

    def test_answer_errors(self) -> None:
        host = InMemoryHost()
        with self.assertRaises(HostError) as ctx:
            host.answer(1, True)
        self.assertEqual(ctx.exception.code, "host.no_dispatcher")

        host.attach(ResponseDispatcher())
        with self.assertRaises(HostError) as ctx:
            host.answer(1, True)
        self.assertEqual(ctx.exception.code, "host.unknown_token")


class TestToastObserver(unittest.TestCase):
    def test_shows_catalog_messages(self) -> None:
        buf = io.StringIO()
        toast = ToastObserver(build_capability_registry(), stream=buf)
        toast.on_capability_resolved("activity-recognition", CapabilityState.GRANTED)
        toast.on_capability_resolved("activity-recognition", CapabilityState.DENIED)
        toast.on_capability_resolved("activity-recognition", CapabilityState.NOT_REQUIRED)
        toast.on_capability_resolved("unknown-thing", CapabilityState.GRANTED)
        self.assertEqual(
            buf.getvalue().splitlines(),
            [
                "Activity Recognition permission granted!",
                "Activity Recognition permission denied. Step counter may not work.",
            ],
        )
        self.assertEqual(len(toast.shown), 2)


if __name__ == "__main__":
    unittest.main()
