"""Random event-set generation for demos and scheduler comparisons."""

from __future__ import annotations

import random
from typing import Optional

from backend.domain.constraints import RandomInstanceConfig, validate_random_instance_config
from backend.domain.models import Event
from backend.utils.config import Settings, get_settings


def default_random_instance_config(settings: Optional[Settings] = None) -> RandomInstanceConfig:
    resolved = settings or get_settings()
    return RandomInstanceConfig(
        count=resolved.random_event_count,
        range_start=resolved.random_range_start,
        range_end=resolved.random_range_end,
        min_length=resolved.random_min_length,
        max_length=resolved.random_max_length,
    )


def generate_random_events(
    config: RandomInstanceConfig,
    rng: Optional[random.Random] = None,
) -> list[Event]:
    """Events ``R1..Rn`` with integer starts in the range and integer lengths."""
    validate_random_instance_config(config)
    generator = rng or random.Random()

    events: list[Event] = []
    for position in range(config.count):
        start = generator.randint(config.range_start, config.range_end)
        length = generator.randint(config.min_length, config.max_length)
        events.append(Event(event_id=f"R{position + 1}", start=start, end=start + length))
    return events
