from dataclasses import dataclass


@dataclass(frozen=True)
class DecodedImage:
    """Engine-specific image handle with its pixel dimensions."""

    width: int
    height: int
    handle: object
