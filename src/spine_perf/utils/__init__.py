"""Small helpers shared by the analyzers."""


def mesh_key(slot_name: str, attachment_name: str) -> str:
    """Composite identifier of a mesh attachment bound to a slot."""
    return f"{slot_name}:{attachment_name}"


def split_mesh_key(key: str) -> tuple[str, str]:
    """
    Split a mesh key back into slot and attachment names.

    Only the first colon separates the two, so attachment names may
    themselves contain colons.
    """
    slot_name, _, attachment_name = key.partition(":")
    return slot_name, attachment_name


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))
