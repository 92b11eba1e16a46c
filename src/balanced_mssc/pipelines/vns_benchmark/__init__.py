from .pipeline import create_pipeline
from .nodes import run_trials
from .results import BatchSummary, append_assignment, append_statistics

__all__ = ["create_pipeline", "run_trials", "BatchSummary", "append_assignment", "append_statistics"]
