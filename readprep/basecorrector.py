"""Correction of mismatched bases in the overlap of paired-end reads."""

from __future__ import annotations

import warnings

from .adaptertrimmer import OverlapResult
from .common import complement, num2qual
from .fastqreader import Read
from .filterresult import FilterResult

GOOD_QUAL = num2qual(30)
BAD_QUAL = num2qual(14)


def correct_by_overlap(
    r1: Read, r2: Read, fr: FilterResult | None, ov: OverlapResult
) -> int:
    """Fix overlap mismatches where one read is confident and the other is not.

    A base of high quality replaces a mismatching base of low quality in the
    other read, together with its quality. Returns the number of bases corrected.
    """
    if ov.diff == 0 or not ov.overlapped:
        return 0

    start1 = max(0, ov.offset)
    start2 = r2.length() - max(0, -ov.offset) - 1

    seq1, qual1 = list(r1.seq), list(r1.quality)
    seq2, qual2 = list(r2.seq), list(r2.quality)

    corrected = 0
    uncorrected = 0
    r1_corrected = False
    r2_corrected = False
    for i in range(ov.overlap_len):
        p1 = start1 + i
        p2 = start2 - i
        if seq1[p1] == complement(seq2[p2]):
            continue
        if qual1[p1] >= GOOD_QUAL and qual2[p2] <= BAD_QUAL:
            fixed = complement(seq1[p1])
            if fr is not None:
                fr.add_correction(seq2[p2], fixed)
            seq2[p2] = fixed
            qual2[p2] = qual1[p1]
            corrected += 1
            r2_corrected = True
        elif qual2[p2] >= GOOD_QUAL and qual1[p1] <= BAD_QUAL:
            fixed = complement(seq2[p2])
            if fr is not None:
                fr.add_correction(seq1[p1], fixed)
            seq1[p1] = fixed
            qual1[p1] = qual2[p2]
            corrected += 1
            r1_corrected = True
        else:
            uncorrected += 1

    if corrected + uncorrected != ov.diff:
        warnings.warn(
            "overlap correction: corrected + uncorrected bases differ from the overlap diff",
            RuntimeWarning,
            stacklevel=2,
        )

    r1.seq, r1.quality = "".join(seq1), "".join(qual1)
    r2.seq, r2.quality = "".join(seq2), "".join(qual2)

    if corrected > 0 and fr is not None:
        fr.inc_corrected_reads(2 if r1_corrected and r2_corrected else 1)

    return corrected