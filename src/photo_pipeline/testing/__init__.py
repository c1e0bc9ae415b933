"""Testing utilities and fakes for the photo pipeline."""

from .fakes import (
    FakeLogger,
    FailingRenderer,
    RecordingRenderer,
    StubOrientationReader,
    create_test_image,
    write_test_image,
)

__all__ = [
    "FakeLogger",
    "FailingRenderer",
    "RecordingRenderer",
    "StubOrientationReader",
    "create_test_image",
    "write_test_image",
]
