"""Project pipelines."""

from kedro.pipeline import Pipeline

from balanced_mssc.pipelines.vns_benchmark import create_pipeline as vns_benchmark_pl


def register_pipelines() -> dict[str, Pipeline]:
    """Register the project's pipelines.

    Returns:
        A mapping from pipeline names to ``Pipeline`` objects.
    """
    vns_benchmark = vns_benchmark_pl()
    return {
        "vns_benchmark": vns_benchmark,
        "__default__": vns_benchmark,
    }
