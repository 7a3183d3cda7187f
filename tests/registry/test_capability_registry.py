import unittest

from permgate.bootstrap_capabilities import build_capability_registry
from permgate.core.errors import InvalidCapability, ValidationError
from permgate.registry.capability_registry import CapabilityDef, CapabilityRegistry


class TestCapabilityRegistry(unittest.TestCase):
    def test_builtin_catalog_has_activity_recognition(self) -> None:
        reg = build_capability_registry()
        ar = reg.require("activity-recognition")
        self.assertEqual(ar.platform_name, "android.permission.ACTIVITY_RECOGNITION")
        self.assertEqual(ar.gated_since, 29)
        self.assertIn("Step counter may not work", ar.denied_message)

    def test_list_is_sorted_by_id(self) -> None:
        ids = [c["capability_id"] for c in build_capability_registry().list_capabilities()]
        self.assertEqual(ids, sorted(ids))
        self.assertIn("post-notifications", ids)

    def test_duplicate_registration_is_rejected(self) -> None:
        reg = CapabilityRegistry()
        reg.register(CapabilityDef("camera", "android.permission.CAMERA", 23))
        with self.assertRaises(ValidationError):
            reg.register(CapabilityDef("camera", "android.permission.CAMERA", 23))

    def test_require_distinguishes_empty_and_unknown(self) -> None:
        reg = CapabilityRegistry()
        with self.assertRaises(InvalidCapability) as ctx:
            reg.require("")
        self.assertEqual(ctx.exception.code, "capability.invalid")
        with self.assertRaises(InvalidCapability) as ctx:
            reg.require("camera")
        self.assertEqual(ctx.exception.code, "capability.unknown")
        self.assertEqual(ctx.exception.data, {"capability_id": "camera"})


if __name__ == "__main__":
    unittest.main()
