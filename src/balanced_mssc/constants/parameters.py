# src/<project>/parameters.py
class Parameters:
    """String constants for YAML parameter paths."""

    class VNSBenchmark:
        INSTANCE_PATH   = "params:vns_benchmark.instance_path"    # e.g. "data/01_raw/iris.txt"
        K               = "params:vns_benchmark.k"                # number of clusters
        TIME_LIMIT      = "params:vns_benchmark.time_limit"       # seconds per run
        N_RUNS          = "params:vns_benchmark.n_runs"           # e.g. 10
        SEED            = "params:vns_benchmark.seed"             # first seed, incremented per run
        INIT_DIR        = "params:vns_benchmark.init_dir"         # snapshot directory or null
        VNS_OPTIONS     = "params:vns_benchmark.vns_options"      # dict forwarded to VNSConfig
