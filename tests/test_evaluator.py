import random

import pytest

from readprep.evaluator import Evaluator, int2seq, seq2int

ADAPTER = "AGATCGGAAGAGCACACGTCTGAACTCCAG"
KNOWN = {"AGATCGGAAGAGC": "Illumina TruSeq Adapter Read 1"}


def write_fastq(path, records):
    with open(path, "w") as fh:
        for name, seq in records:
            fh.write(f"{name}\n{seq}\n+\n{'I' * len(seq)}\n")
    return path


@pytest.fixture(scope="module")
def adapter_fastq(tmp_path_factory):
    rng = random.Random(1)
    path = tmp_path_factory.mktemp("data") / "adapter.fq"
    records = []
    for i in range(10000):
        insert = "".join(rng.choice("ATCG") for _ in range(30))
        records.append((f"@read{i}", insert + ADAPTER))
    return write_fastq(path, records)


def test_seq2int_int2seq_round_trip():
    s = "ATCGATCGAT"
    assert int2seq(seq2int(s, 0, 10, -1), 10) == s


def test_int2seq_encoding():
    assert int2seq(0, 4) == "AAAA"
    assert int2seq(0b00011011, 4) == "ATCG"


def test_seq2int_rejects_n():
    assert seq2int("ATCNATCGAT", 0, 10) == -1


def test_seq2int_rolling_matches_full():
    seq = "GATTACAGGCATCGTTAGCA"
    prev = seq2int(seq, 0, 8)
    for pos in range(1, len(seq) - 8 + 1):
        rolled = seq2int(seq, pos, 8, prev)
        assert rolled == seq2int(seq, pos, 8)
        prev = rolled


def test_seq2int_rolling_hits_n():
    seq = "ACGTACGTN"
    prev = seq2int(seq, 0, 8)
    assert seq2int(seq, 1, 8, prev) == -1


def test_two_color_system_detected(tmp_path):
    path = write_fastq(tmp_path / "a.fq", [("@NS500123:1:XYZ", "ACGTACGT")])
    assert Evaluator(path).is_two_color_system() is True


def test_two_color_system_other_instrument(tmp_path):
    path = write_fastq(tmp_path / "a.fq", [("@M00001:1:XYZ", "ACGTACGT")])
    assert Evaluator(path).is_two_color_system() is False


def test_two_color_system_empty_file(tmp_path):
    path = tmp_path / "empty.fq"
    path.write_text("")
    assert Evaluator(path).is_two_color_system() is False


def test_compute_seq_len_takes_longest(tmp_path):
    path = write_fastq(
        tmp_path / "a.fq", [("@r1", "ACGT"), ("@r2", "ACGTACGTAC"), ("@r3", "ACG")]
    )
    assert Evaluator(path).compute_seq_len(path) == len("ACGTACGTAC")


def test_compute_seq_len_only_samples_first_thousand(tmp_path):
    records = [(f"@r{i}", "ACGTA") for i in range(1000)]
    records.append(("@long", "A" * 50))
    path = write_fastq(tmp_path / "a.fq", records)
    assert Evaluator(path).compute_seq_len(path) == len("ACGTA")


def test_evaluate_seq_len_both_files(tmp_path):
    p1 = write_fastq(tmp_path / "r1.fq", [("@r", "ACGTACGT")])
    p2 = write_fastq(tmp_path / "r2.fq", [("@r", "ACGTAC")])
    ev = Evaluator(p1, p2)
    assert ev.evaluate_seq_len() == (len("ACGTACGT"), len("ACGTAC"))
    assert ev.seq_len1 == len("ACGTACGT")
    assert ev.seq_len2 == len("ACGTAC")


def test_evaluate_seq_len_single_file(tmp_path):
    p1 = write_fastq(tmp_path / "r1.fq", [("@r", "ACGTACGT")])
    ev = Evaluator(p1)
    assert ev.evaluate_seq_len() == (len("ACGTACGT"), 0)


def test_over_rep_seq_keeps_longest(tmp_path):
    seq = "GATTACAGGCATCGTTAGCAACTGGTCCAT"
    path = write_fastq(tmp_path / "a.fq", [(f"@r{i}", seq) for i in range(100)])
    hot = Evaluator(path).compute_over_rep_seq(path, len(seq))
    assert hot == {seq[0:28]: 100, seq[1:29]: 100}


def test_over_rep_seq_none_for_few_reads(tmp_path):
    seq = "GATTACAGGCATCGTTAGCAACTGGTCCAT"
    path = write_fastq(tmp_path / "a.fq", [(f"@r{i}", seq) for i in range(2)])
    assert Evaluator(path).compute_over_rep_seq(path, len(seq)) == {}


def test_evaluate_read_num_small_file(tmp_path):
    path = write_fastq(tmp_path / "a.fq", [(f"@r{i}", "ACGTACGT") for i in range(37)])
    assert Evaluator(path).evaluate_read_num() == 37


def test_eval_adapter_needs_enough_reads(tmp_path):
    path = write_fastq(tmp_path / "a.fq", [(f"@r{i}", "ACGT" * 15) for i in range(50)])
    assert Evaluator(path).eval_adapter_and_read_num(False) == ("", 50)


def test_eval_adapter_uses_read2_file(tmp_path):
    p1 = write_fastq(tmp_path / "r1.fq", [(f"@r{i}", "ACGT" * 15) for i in range(5)])
    p2 = write_fastq(tmp_path / "r2.fq", [(f"@r{i}", "ACGT" * 15) for i in range(8)])
    assert Evaluator(p1, p2).eval_adapter_and_read_num(True) == ("", 8)


def test_eval_adapter_matches_known(adapter_fastq):
    ev = Evaluator(adapter_fastq, known_adapters=KNOWN)
    adapter, read_num = ev.eval_adapter_and_read_num(False)
    assert adapter == "AGATCGGAAGAGC"
    assert read_num == 10000


def test_eval_adapter_unknown_unresolved(adapter_fastq):
    ev = Evaluator(adapter_fastq)
    adapter, read_num = ev.eval_adapter_and_read_num(False)
    assert adapter == ""
    assert read_num == 10000


def test_match_known_adapter_prefix():
    ev = Evaluator(known_adapters=KNOWN)
    assert ev.match_known_adapter(ADAPTER) == "AGATCGGAAGAGC"


def test_match_known_adapter_too_short():
    ev = Evaluator(known_adapters=KNOWN)
    assert ev.match_known_adapter("AGATCGG") == ""


def test_match_known_adapter_mismatch():
    ev = Evaluator(known_adapters=KNOWN)
    assert ev.match_known_adapter("TGATCGGAAGAGCACAC") == ""


def test_match_known_adapter_sorted_order():
    ev = Evaluator(known_adapters={"AGATCGGAAG": "b", "AGATCG": "a"})
    assert ev.match_known_adapter(ADAPTER) == "AGATCG"