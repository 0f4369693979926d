"""Pipeline modules for orchestrating correction runs."""

from .correction_pipeline import CorrectionPipeline

__all__ = [
    "CorrectionPipeline",
]
