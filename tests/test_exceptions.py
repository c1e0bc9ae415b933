import pytest

from photo_pipeline.core.exceptions import (
    ConfigurationError,
    DecodeError,
    PhotoPipelineError,
    RenderError,
    StorageError,
    storage_operation,
)


@pytest.mark.parametrize(
    "error_cls", [DecodeError, RenderError, StorageError, ConfigurationError]
)
def test_errors_share_base(error_cls) -> None:
    assert issubclass(error_cls, PhotoPipelineError)


def test_storage_operation_wraps_os_error() -> None:
    with pytest.raises(StorageError, match="Moving a to b failed") as info:
        with storage_operation("Moving a to b"):
            raise FileNotFoundError("gone")
    assert isinstance(info.value.__cause__, FileNotFoundError)


def test_storage_operation_passes_pipeline_errors() -> None:
    with pytest.raises(DecodeError):
        with storage_operation("Reading"):
            raise DecodeError("bad bytes")


def test_storage_operation_ignores_other_errors() -> None:
    with pytest.raises(ValueError):
        with storage_operation("Reading"):
            raise ValueError("boom")
