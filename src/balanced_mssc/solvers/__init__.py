"""
Search engine: solution state, local search, shaking and the VNS controller.
Import from the submodules directly.
"""
