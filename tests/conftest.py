from __future__ import annotations

import pytest

from contractgen.config import GenerationOptions
from tests._fixtures.host_types import RecordingContext


@pytest.fixture
def options() -> GenerationOptions:
    """Default options with optional properties off so member types read plainly."""
    return GenerationOptions(enable_optional_properties=False)


@pytest.fixture
def context(options: GenerationOptions) -> RecordingContext:
    """Provide a recording mapping context built on the default options."""
    return RecordingContext(options)
