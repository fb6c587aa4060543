# readprep

Building blocks for preprocessing sequencing reads in FASTQ format: reading
plain or gzip-compressed FASTQ files and FASTA files, filtering reads by
quality, length, N content and complexity, sliding-window quality cutting,
adapter trimming by sequence or by a given paired-end overlap, overlap-based
base correction, adapter auto-detection, duplication estimation, and HTML and
JSON report fragments.

The package uses only the Python standard library and supports Python 3.10
and later.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

| Module | Contents |
| --- | --- |
| `readprep.common` | `FilterOutcome` codes, `complement`, `num2qual`, `failed_type_name` |
| `readprep.fastqreader` | `Read`, `ReadPair`, `FastqReader`, `FastqReaderPair`, `FastqError`, `is_fastq`, `is_zip_fastq` |
| `readprep.fastareader` | `FastaReader` (`read_next`, `read_all`, iteration, `contigs`) |
| `readprep.nucleotidetree` | `NucleotideTree` with `add_seq` and `dominant_path`, `NucleotideNode` |
| `readprep.filter` | `Filter` and `FilterOptions`: quality, N, length, complexity and index filters; `trim_and_cut` |
| `readprep.adaptertrimmer` | `trim_by_sequence`, `trim_by_multi_sequences`, `trim_by_overlap`, `OverlapResult` |
| `readprep.basecorrector` | `correct_by_overlap` for mismatches inside an overlap |
| `readprep.filterresult` | `FilterResult` counters, `ReportFlags`, `merge`, console summary and JSON/HTML fragments |
| `readprep.evaluator` | `Evaluator` for read length, read count, overrepresented sequences and adapter detection; `seq2int`, `int2seq` |
| `readprep.duplicate` | `Duplicate`, a Bloom-filter duplication estimator with accuracy levels 1 to 6 |
| `readprep.htmlreporter` | `HtmlReporter` (page header, footer, insert size plot), `format_number`, `get_percents`, `output_row` |

## Example

```python
from readprep.fastqreader import FastqReader
from readprep.filter import Filter, FilterOptions
from readprep.adaptertrimmer import trim_by_sequence
from readprep.filterresult import FilterResult

read_filter = Filter(FilterOptions(cut_tail=True))
result = FilterResult()

with FastqReader("reads.fq.gz") as reader:
    for read in reader:
        trim_by_sequence(read, result, "AGATCGGAAGAGC")
        read, front_trimmed = read_filter.trim_and_cut(read, 0, 0)
        outcome = read_filter.pass_filter(read)
        result.add_filter_result(outcome, 1)

print("\n".join(result.summary_lines()))
```

`FastqReader` decompresses files whose names end in `.gz`, converts phred64
qualities to phred33 when `phred64=True`, and raises `FastqError` for
malformed records. `FastqReaderPair` reads pairs from two files, or from one
interleaved file with `interleaved=True`.

`Evaluator` takes the input file names, the number of tail bases trimmed from
read1, and an optional mapping of known adapter sequences to descriptions;
`eval_adapter_and_read_num` returns the detected adapter (or `''`) together
with the estimated read count.

## What the package does not do

- There is no command-line program; the pieces are used from Python.
- It does not write trimmed or filtered FASTQ output, split output files,
  merge read pairs, or handle UMIs.
- It does not find the overlap between read1 and read2: `trim_by_overlap`
  and `correct_by_overlap` take an `OverlapResult` that the caller supplies.
- It ships no list of known adapters; pass one to `Evaluator` if wanted.
- It does not collect per-cycle read statistics and does not assemble a
  complete HTML or JSON report: `HtmlReporter` and `FilterResult` return the
  fragments as strings for the caller to put together and write.