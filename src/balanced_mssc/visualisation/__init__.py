from .partition_visualizer import PartitionVisualizer
