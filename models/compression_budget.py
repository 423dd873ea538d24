"""Compression budget and named presets."""

from dataclasses import dataclass, replace
from typing import Dict

from models.errors import InvalidBudget


@dataclass(frozen=True)
class CompressionBudget:
    """Ceiling on output size and long edge, plus the starting quality."""
    
    max_output_bytes: int
    max_dimension: int
    initial_quality: int = 80
    
    def __post_init__(self):
        for field_name in ('max_output_bytes', 'max_dimension', 'initial_quality'):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidBudget(f"{field_name} must be an integer, got {value!r}")
        if self.max_output_bytes <= 0:
            raise InvalidBudget(f"max_output_bytes must be > 0, got {self.max_output_bytes}")
        if self.max_dimension <= 0:
            raise InvalidBudget(f"max_dimension must be > 0, got {self.max_dimension}")
        if not (1 <= self.initial_quality <= 100):
            raise InvalidBudget(f"initial_quality must be 1-100, got {self.initial_quality}")
    
    def with_overrides(self, **changes) -> 'CompressionBudget':
        """Copy with some fields replaced; None values are ignored."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return replace(self, **changes)


DEFAULT = CompressionBudget(
    max_output_bytes=1024 * 1024,
    max_dimension=1024,
    initial_quality=80,
)

PROFILE_PHOTO = CompressionBudget(
    max_output_bytes=512 * 1024,
    max_dimension=512,
    initial_quality=85,
)

CHAT_IMAGE = CompressionBudget(
    max_output_bytes=2 * 1024 * 1024,
    max_dimension=1920,
    initial_quality=75,
)

PRESETS: Dict[str, CompressionBudget] = {
    'default': DEFAULT,
    'profile_photo': PROFILE_PHOTO,
    'chat_image': CHAT_IMAGE,
}


def get_preset(name: str) -> CompressionBudget:
    """Look up a preset budget by name."""
    try:
        return PRESETS[name]
    except KeyError:
        known = ', '.join(sorted(PRESETS))
        raise KeyError(f"Unknown preset {name!r}, expected one of: {known}") from None
