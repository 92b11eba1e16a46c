from .instance_reader import read_instance
from .snapshot import read_snapshot, snapshot_path, write_snapshot
