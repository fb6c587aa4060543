"""Building blocks for FASTQ read preprocessing and quality control."""

__version__ = "0.24.0"

__all__ = [
    "adaptertrimmer",
    "basecorrector",
    "common",
    "duplicate",
    "evaluator",
    "fastareader",
    "fastqreader",
    "filter",
    "filterresult",
    "htmlreporter",
    "nucleotidetree",
]