from kedro.pipeline import Pipeline, node

from ...constants import Parameters as P, Catalog as C
from ...preprocessing import read_instance
from .nodes import benchmark_instance, convergence_figure, summarise_batch


def create_pipeline(**kwargs):
    """
    Batch benchmark of the VNS on one instance:
        Input  : instance path + run parameters
        Outputs: statistics / assignment / per-run tables and a convergence figure
    """
    return Pipeline(
        [
            node(
                func=read_instance,
                inputs=P.VNSBenchmark.INSTANCE_PATH,
                outputs=C.Data.POINTS,
                name="read_instance",
            ),
            node(
                func=benchmark_instance,
                inputs=[
                    C.Data.POINTS,
                    P.VNSBenchmark.INSTANCE_PATH,
                    P.VNSBenchmark.K,
                    P.VNSBenchmark.TIME_LIMIT,
                    P.VNSBenchmark.N_RUNS,
                    P.VNSBenchmark.SEED,
                    P.VNSBenchmark.INIT_DIR,
                    P.VNSBenchmark.VNS_OPTIONS,
                ],
                outputs=C.Data.BATCH_SUMMARY,
                name="run_vns_trials",
            ),
            node(
                func=summarise_batch,
                inputs=C.Data.BATCH_SUMMARY,
                outputs=[
                    C.Reporting.STATISTICS_TABLE,
                    C.Reporting.ASSIGNMENT_TABLE,
                    C.Reporting.RUNS_TABLE,
                ],
                name="summarise_batch",
            ),
            node(
                func=convergence_figure,
                inputs=C.Data.BATCH_SUMMARY,
                outputs=C.Reporting.CONVERGENCE_FIGURE,
                name="plot_convergence",
            ),
        ]
    )
