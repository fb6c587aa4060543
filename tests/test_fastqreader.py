import gzip
import os

import pytest

from readprep.fastqreader import (
    FastqError,
    FastqReader,
    FastqReaderPair,
    Read,
    ReadPair,
    is_fastq,
    is_zip_fastq,
)

RECORDS = (
    "@r1\nACGTN\n+\nIIIII\n"
    "@r2\nTTGCA\n+\n#####\n"
)


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text)
    return path


def test_reads_records_then_none(tmp_path):
    path = write(tmp_path, "a.fq", RECORDS)
    with FastqReader(path) as reader:
        first = reader.read()
        second = reader.read()
        assert reader.read() is None
    assert first == Read("@r1", "ACGTN", "+", "IIIII")
    assert second.name == "@r2"
    assert second.seq == "TTGCA"


def test_iteration_matches_read(tmp_path):
    path = write(tmp_path, "a.fq", RECORDS)
    with FastqReader(path) as reader:
        names = [record.name for record in reader]
    assert names == ["@r1", "@r2"]


def test_crlf_same_as_lf(tmp_path):
    lf = write(tmp_path, "lf.fq", RECORDS)
    crlf = tmp_path / "crlf.fq"
    crlf.write_bytes(RECORDS.replace("\n", "\r\n").encode())
    with FastqReader(lf) as a, FastqReader(crlf) as b:
        assert list(a) == list(b)


def test_missing_final_newline(tmp_path):
    path = write(tmp_path, "a.fq", RECORDS.rstrip("\n"))
    with FastqReader(path) as reader:
        records = list(reader)
    assert records[-1].quality == "#####"
    assert len(records) == 2


def test_skips_lines_before_name(tmp_path):
    path = write(tmp_path, "a.fq", "junk\n\n" + RECORDS)
    with FastqReader(path) as reader:
        assert reader.read().name == "@r1"


def test_empty_file(tmp_path):
    path = write(tmp_path, "e.fq", "")
    with FastqReader(path) as reader:
        assert reader.read() is None


def test_missing_plus_raises(tmp_path):
    path = write(tmp_path, "bad.fq", "@r1\nACGT\nX\nIIII\n")
    with FastqReader(path) as reader:
        with pytest.raises(FastqError, match="'\\+' expected"):
            reader.read()


def test_quality_length_mismatch_raises(tmp_path):
    path = write(tmp_path, "bad.fq", "@r1\nACGT\n+\nIII\n")
    with FastqReader(path) as reader:
        with pytest.raises(FastqError, match="different length"):
            reader.read()


def test_truncated_record_raises(tmp_path):
    path = write(tmp_path, "bad.fq", "@r1\nACGT\n")
    with FastqReader(path) as reader:
        with pytest.raises(FastqError):
            reader.read()


def test_gzip_matches_plain(tmp_path):
    plain = write(tmp_path, "a.fq", RECORDS)
    zipped = tmp_path / "a.fq.gz"
    with gzip.open(zipped, "wt") as handle:
        handle.write(RECORDS)
    with FastqReader(plain) as a, FastqReader(zipped) as b:
        assert b.zipped
        assert list(a) == list(b)


def test_gzip_multi_member(tmp_path):
    zipped = tmp_path / "m.fq.gz"
    zipped.write_bytes(
        gzip.compress(b"@r1\nACGTN\n+\nIIIII\n") + gzip.compress(b"@r2\nTTGCA\n+\n#####\n")
    )
    with FastqReader(zipped) as reader:
        assert [r.name for r in reader] == ["@r1", "@r2"]


def test_bad_gzip_header(tmp_path):
    path = tmp_path / "bad.fq.gz"
    path.write_bytes(b"this is not gzip data at all")
    with pytest.raises(FastqError):
        FastqReader(path)


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        FastqReader(tmp_path / "missing.fq")


def test_phred64_converted(tmp_path):
    path = write(tmp_path, "p.fq", "@r1\nAC\n+\nhh\n")
    with FastqReader(path, phred64=True) as reader:
        assert reader.read().quality == "II"


def test_bytes_progress_at_end(tmp_path):
    path = write(tmp_path, "a.fq", RECORDS)
    with FastqReader(path) as reader:
        list(reader)
        consumed, total = reader.bytes_progress()
    assert total == os.path.getsize(path)
    assert consumed == total


def test_reverse_complement():
    read = Read("@r", "AACG", "+", "ABCD")
    rc = read.reverse_complement()
    assert rc.seq == "CGTT"
    assert rc.quality == "DCBA"
    assert rc.strand == "-"
    back = rc.reverse_complement()
    assert back.seq == read.seq
    assert back.quality == read.quality
    assert back.strand == "+"


def test_resize_shrinks_only():
    read = Read("@r", "ACGTACGT", "+", "IIIIIIII")
    read.resize(10)
    assert read.length() == 8
    read.resize(-1)
    assert read.length() == 8
    read.resize(3)
    assert read.seq == "ACG"
    assert len(read.quality) == 3


def test_pair_reader(tmp_path):
    left = write(tmp_path, "r1.fq", RECORDS)
    right = write(tmp_path, "r2.fq", "@s1\nGGGG\n+\nIIII\n")
    with FastqReaderPair(left, right) as pair_reader:
        pair = pair_reader.read()
        assert isinstance(pair, ReadPair)
        assert pair.left.name == "@r1"
        assert pair.right.name == "@s1"
        assert pair_reader.read() is None


def test_interleaved_pair_reader(tmp_path):
    path = write(tmp_path, "i.fq", RECORDS)
    with FastqReaderPair(path, interleaved=True) as pair_reader:
        pairs = list(pair_reader)
    assert len(pairs) == 1
    assert (pairs[0].left.name, pairs[0].right.name) == ("@r1", "@r2")


def test_pair_reader_requires_right(tmp_path):
    path = write(tmp_path, "i.fq", RECORDS)
    with pytest.raises(ValueError):
        FastqReaderPair(path)


@pytest.mark.parametrize("name", ["x.fastq.gz", "x.fq.gz", "x.fasta.gz", "x.fa.gz"])
def test_is_zip_fastq(name):
    assert is_zip_fastq(name)
    assert not is_fastq(name)


@pytest.mark.parametrize("name", ["x.fastq", "x.fq", "x.fasta", "x.fa"])
def test_is_fastq(name):
    assert is_fastq(name)
    assert not is_zip_fastq(name)


def test_other_extensions_rejected():
    assert not is_fastq("x.txt")
    assert not is_zip_fastq("x.txt.gz")