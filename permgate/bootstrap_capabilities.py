from __future__ import annotations

from permgate.registry.capability_registry import CapabilityDef, CapabilityRegistry


def build_capability_registry() -> CapabilityRegistry:
    """
    Register the built-in capability catalog shipped with the library.
    """
    reg = CapabilityRegistry()

    def reg_cap(capability_id: str, platform_name: str, gated_since: int, title: str, granted: str, denied: str) -> None:
        reg.register(
            CapabilityDef(
                capability_id=capability_id,
                platform_name=platform_name,
                gated_since=gated_since,
                title=title,
                granted_message=granted,
                denied_message=denied,
            )
        )

    # Runtime-gated from API 29 (Android 10); a normal install-time permission before that.
    reg_cap(
        "activity-recognition",
        "android.permission.ACTIVITY_RECOGNITION",
        29,
        "Activity recognition",
        "Activity Recognition permission granted!",
        "Activity Recognition permission denied. Step counter may not work.",
    )
    reg_cap(
        "body-sensors",
        "android.permission.BODY_SENSORS",
        23,
        "Body sensors",
        "Body sensors permission granted!",
        "Body sensors permission denied. Heart rate readings are unavailable.",
    )
    reg_cap(
        "fine-location",
        "android.permission.ACCESS_FINE_LOCATION",
        23,
        "Precise location",
        "Location permission granted!",
        "Location permission denied. Route tracking may not work.",
    )
    reg_cap(
        "camera",
        "android.permission.CAMERA",
        23,
        "Camera",
        "Camera permission granted!",
        "Camera permission denied. Meal scanning is unavailable.",
    )
    reg_cap(
        "post-notifications",
        "android.permission.POST_NOTIFICATIONS",
        33,
        "Notifications",
        "Notification permission granted!",
        "Notification permission denied. Reminders will not be shown.",
    )

    return reg
