# src/<project>/catalog.py
class Catalog:
    """String constants for dataset names."""

    class Data:
        POINTS              = "instance_points"
        BATCH_SUMMARY       = "vns_batch_summary"

    class Reporting:
        STATISTICS_TABLE    = "vns_statistics_table"
        ASSIGNMENT_TABLE    = "vns_assignment_table"
        RUNS_TABLE          = "vns_runs_table"
        CONVERGENCE_FIGURE  = "vns_convergence_figure"
