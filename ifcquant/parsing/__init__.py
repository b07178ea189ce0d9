"""STEP text tokenizing, record parsing, and bounded reading."""

from ifcquant.parsing.record import extract_number, extract_string, parse_record
from ifcquant.parsing.tokenizer import split_params, split_records

__all__ = [
    "extract_number",
    "extract_string",
    "parse_record",
    "split_params",
    "split_records",
]
