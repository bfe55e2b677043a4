"""Learned secondary index with bit-packed permutations, B-tree and hash baselines, and radix tree nodes."""

__version__ = "1.0.0"