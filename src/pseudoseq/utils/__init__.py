"""Utility modules for pseudoseq."""

from pseudoseq.utils.io import save_bed
from pseudoseq.utils.logging_utils import setup_logger
