"""QuickCash nearby-jobs discovery: distance filtering for job postings."""

__version__ = "0.1.0"
