"""Icon variant-matrix generation.

Priority ordering of theme/state axes, grid resolution, node materialization
and assembly into a single variant set, with deduplication against names
already in the document.
"""
