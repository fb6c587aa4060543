import pytest

from readprep.adaptertrimmer import (
    OverlapResult,
    trim_by_multi_sequences,
    trim_by_overlap,
    trim_by_sequence,
)
from readprep.fastqreader import Read
from readprep.filterresult import FilterResult

SEQ1 = "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAATTTTCCCCGGGG"
QUAL1 = "///EEEEEEEEEEEEEEEEEEEEEEEEEE////EEEEEEEEEEEEE////E////E"

SEQ2 = (
    "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAATTTTCCCCGGGG"
    "AAATTTCCCGGGAAATTTCCCGGGATCGATCGATCGATCGAATTCC"
)
QUAL2 = (
    "///EEEEEEEEEEEEEEEEEEEEEEEEEE////EEEEEEEEEEEEE////E////E"
    "EEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEE"
)

MULTI_ADAPTERS = [
    "GCTAGCTAGCTAGCTA",
    "AAATTTCCCGGGAAATTTCCCGGG",
    "ATCGATCGATCGATCG",
    "AATTCCGGAATTCCGG",
]


def test_trim_by_sequence_source_case():
    read = Read("@name", SEQ1, "+", QUAL1)
    assert trim_by_sequence(read, None, "TTTTCCACGGGGATACTACTG") is True
    assert read.seq == "TTTTAACCCCCCCCCCCCCCCCCCCCCCCCCCCCAATTTTAAAA"
    assert read.quality == QUAL1[: len(read.seq)]


def test_trim_by_multi_sequences_source_case():
    read = Read("@name", SEQ2, "+", QUAL2)
    assert trim_by_multi_sequences(read, None, MULTI_ADAPTERS) is True
    assert read.seq == SEQ1


def test_trim_by_multi_sequences_records_removed_tail():
    read = Read("@name", SEQ2, "+", QUAL2)
    fr = FilterResult()
    trim_by_multi_sequences(read, fr, MULTI_ADAPTERS, is_r2=True)
    assert fr.adapter2 == {SEQ2[len(SEQ1):]: 1}
    assert fr.trimmed_adapter_reads == 1
    assert fr.trimmed_adapter_bases == len(SEQ2) - len(SEQ1)


def test_trim_by_multi_sequences_without_counter():
    read = Read("@name", SEQ2, "+", QUAL2)
    fr = FilterResult()
    trim_by_multi_sequences(read, fr, MULTI_ADAPTERS, inc_trimmed_counter=False)
    assert fr.trimmed_adapter_reads == 0
    assert fr.trimmed_adapter_bases == len(SEQ2) - len(SEQ1)


def test_trim_by_sequence_records_adapter():
    read = Read("@name", SEQ1, "+", QUAL1)
    fr = FilterResult()
    trim_by_sequence(read, fr, "TTTTCCACGGGGATACTACTG")
    assert fr.adapter1 == {SEQ1[len(read.seq):]: 1}
    assert fr.adapter2 == {}


def test_trim_by_sequence_no_match_leaves_read():
    read = Read("@name", "A" * 40, "+", "E" * 40)
    assert trim_by_sequence(read, None, "GCGCGCGCGCGC") is False
    assert read.seq == "A" * 40


def test_adapter_shorter_than_requirement_is_ignored():
    read = Read("@name", SEQ1, "+", QUAL1)
    assert trim_by_sequence(read, None, "GGG", match_req=4) is False
    assert read.seq == SEQ1


def test_trim_by_overlap_not_overlapped():
    r1 = Read("@a", "ACGTACGTAC", "+", "EEEEEEEEEE")
    r2 = Read("@b", "GTACGTACGT", "+", "EEEEEEEEEE")
    ov = OverlapResult(overlapped=False)
    assert trim_by_overlap(r1, r2, None, ov) is False
    assert r1.seq == "ACGTACGTAC"


def test_trim_by_overlap_positive_offset_does_nothing():
    r1 = Read("@a", "ACGTACGTAC", "+", "EEEEEEEEEE")
    r2 = Read("@b", "GTACGTACGT", "+", "EEEEEEEEEE")
    ov = OverlapResult(overlapped=True, offset=2, overlap_len=8, diff=0)
    assert trim_by_overlap(r1, r2, None, ov) is False
    assert r2.seq == "GTACGTACGT"


def test_trim_by_overlap_negative_offset_cuts_both():
    r1 = Read("@a", "ACGTACGTAC", "+", "EEEEEEEEEE")
    r2 = Read("@b", "GTACGTACGT", "+", "EEEEEEEEEE")
    fr = FilterResult()
    ov = OverlapResult(overlapped=True, offset=-2, overlap_len=6, diff=0)
    assert trim_by_overlap(r1, r2, fr, ov) is True
    assert r1.seq == "ACGTACGTAC"[:6]
    assert r2.seq == "GTACGTACGT"[:6]
    assert fr.adapter1 == {"ACGTACGTAC"[6:]: 1}
    assert fr.adapter2 == {"GTACGTACGT"[6:]: 1}
    assert fr.trimmed_adapter_reads == 2


def test_trim_by_overlap_front_trimmed_extends_length():
    r1 = Read("@a", "ACGTACGTAC", "+", "EEEEEEEEEE")
    r2 = Read("@b", "GTACGTACGT", "+", "EEEEEEEEEE")
    ov = OverlapResult(overlapped=True, offset=-2, overlap_len=6, diff=0)
    trim_by_overlap(r1, r2, None, ov, front_trimmed1=1, front_trimmed2=3)
    assert r1.length() == 6 + 3
    assert r2.length() == 6 + 1


@pytest.mark.parametrize("extra", [0, 5])
def test_trim_by_overlap_length_never_grows(extra):
    r1 = Read("@a", "ACGT", "+", "EEEE")
    r2 = Read("@b", "ACGT", "+", "EEEE")
    ov = OverlapResult(overlapped=True, offset=-1, overlap_len=4, diff=0)
    trim_by_overlap(r1, r2, None, ov, front_trimmed1=extra, front_trimmed2=extra)
    assert r1.seq == "ACGT"
    assert r2.seq == "ACGT"