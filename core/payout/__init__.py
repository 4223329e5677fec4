from .splits import EscrowSplits, compute_splits, to_money

__all__ = ["EscrowSplits", "compute_splits", "to_money"]
