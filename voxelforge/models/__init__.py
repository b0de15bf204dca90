# Model package init
from .generation_run import GenerationRun  # noqa: F401 re-export

__all__ = ["GenerationRun"]
