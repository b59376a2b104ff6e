"""Pytest configuration and shared fixtures."""

import pytest

from juliafield.field import FieldConfig, ParticleField


@pytest.fixture
def small_field() -> ParticleField:
    """A 3x3x3 field on the default [-3, 3] domain."""
    return ParticleField(FieldConfig(particle_count=27, unit=0.2))


@pytest.fixture
def medium_field() -> ParticleField:
    """A 12x12x12 field, large enough for varied colors."""
    return ParticleField(FieldConfig(particle_count=12 ** 3, unit=0.2))
