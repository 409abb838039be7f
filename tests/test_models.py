"""Tests for views, sequence helpers and the genome store."""

import gzip

import numpy as np
import pytest

from pseudoseq.simulate.seqsim.errors import InvalidIntervalError
from pseudoseq.simulate.seqsim.genome import GenomeStore
from pseudoseq.simulate.seqsim.models import (
    SequencingView, Strand, check_view, extract_sequence, summarize_lengths,
    summarize_tags
)
from pseudoseq.simulate.seqsim.seq_utils import (
    SUBSTITUTION_TABLE, int_to_kmer, quality_string,
    random_bases, reverse_complement, substitution_targets, unique_kmers
)


class TestSequencingView:
    """Test view construction and end arithmetic."""

    def test_length(self):
        """Coordinates are inclusive."""
        assert SequencingView(0, 1, 10).length == 10
        assert SequencingView(0, 7, 7).length == 1

    def test_invalid_interval(self):
        """start > stop and start < 1 are rejected."""
        with pytest.raises(InvalidIntervalError):
            SequencingView(0, 10, 5)
        with pytest.raises(InvalidIntervalError):
            SequencingView(0, 0, 5)

    def test_invalid_interval_is_value_error(self):
        with pytest.raises(ValueError):
            SequencingView(0, 3, 2)

    def test_ends_follow_strand(self):
        fwd = SequencingView(0, 5, 15)
        rev = fwd.flipped()
        assert (fwd.first, fwd.last) == (5, 15)
        assert (rev.first, rev.last) == (15, 5)
        assert rev.is_reverse
        assert rev.flipped() == fwd

    def test_head_tail_forward(self):
        v = SequencingView(0, 1, 20)
        assert v.head(5) == SequencingView(0, 1, 5)
        assert v.tail(5) == SequencingView(0, 16, 20)

    def test_head_tail_reverse(self):
        """A reverse view is read from its stop position."""
        v = SequencingView(0, 1, 20, Strand.REVERSE)
        assert v.head(5) == SequencingView(0, 16, 20, Strand.REVERSE)
        assert v.tail(5) == SequencingView(0, 1, 5, Strand.REVERSE)

    def test_tail_with_strand(self):
        v = SequencingView(0, 1, 20, tag=3)
        t = v.tail(4, strand=Strand.REVERSE)
        assert t == SequencingView(0, 17, 20, Strand.REVERSE, tag=3)

    def test_subview(self):
        fwd = SequencingView(0, 11, 30)
        assert fwd.subview(2, 5) == SequencingView(0, 13, 17)
        rev = fwd.flipped()
        assert rev.subview(2, 5) == SequencingView(0, 24, 28, Strand.REVERSE)
        assert rev.subview(0, 3, Strand.FORWARD) == SequencingView(0, 28, 30)

    def test_subview_out_of_range(self):
        v = SequencingView(0, 1, 10)
        with pytest.raises(InvalidIntervalError):
            v.subview(8, 3)
        with pytest.raises(InvalidIntervalError):
            v.head(11)

    def test_views_are_immutable(self):
        v = SequencingView(0, 1, 10)
        with pytest.raises(AttributeError):
            v.start = 2


class TestExtractSequence:
    """Test base materialization."""

    def test_forward(self):
        genome = ["ACGTTTGGCA"]
        assert extract_sequence(genome, SequencingView(0, 2, 5)) == "CGTT"

    def test_reverse(self):
        genome = ["ACGTTTGGCA"]
        view = SequencingView(0, 2, 5, Strand.REVERSE)
        assert extract_sequence(genome, view) == "AACG"

    def test_out_of_bounds(self):
        with pytest.raises(InvalidIntervalError):
            extract_sequence(["ACGT"], SequencingView(0, 2, 5))
        with pytest.raises(InvalidIntervalError):
            extract_sequence(["ACGT"], SequencingView(1, 1, 2))

    def test_check_view(self):
        """Plain lists and genome stores share one bounds check."""
        for genome in (["ACGTACGTAC"], GenomeStore.from_sequences(["ACGTACGTAC"])):
            check_view(genome, SequencingView(0, 1, 10))
            with pytest.raises(InvalidIntervalError):
                check_view(genome, SequencingView(0, 5, 11))
            with pytest.raises(InvalidIntervalError):
                check_view(genome, SequencingView(1, 1, 2))


class TestSummaries:

    def test_summarize_lengths(self):
        views = [SequencingView(0, 1, 10), SequencingView(0, 1, 30)]
        assert summarize_lengths(views) == (30, 20.0, 10)

    def test_summarize_lengths_empty(self):
        assert summarize_lengths([]) == (0, 0.0, 0)

    def test_summarize_tags(self):
        views = [
            SequencingView(0, 1, 10, tag=1),
            SequencingView(0, 1, 10, tag=1),
            SequencingView(0, 1, 10, tag=2),
            SequencingView(0, 1, 10),
        ]
        assert summarize_tags(views) == {1: 2, 2: 1}


class TestSeqUtils:
    """Test sequence helper functions."""

    def test_reverse_complement(self):
        assert reverse_complement("AACGTN") == "NACGTT"

    def test_substitution_targets(self):
        for base, targets in SUBSTITUTION_TABLE.items():
            assert base not in targets
            assert len(set(targets)) == 3
        assert substitution_targets("N") == ("N", "N", "N")

    def test_int_to_kmer(self):
        assert int_to_kmer(0, 4) == "AAAA"
        assert int_to_kmer(0b11, 2) == "AT"
        assert int_to_kmer(0b1110, 2) == "TG"

    def test_unique_kmers(self):
        kmers = unique_kmers(50, 16, rng=np.random.default_rng(0))
        assert len(kmers) == 50
        assert len(set(kmers)) == 50
        assert all(len(k) == 16 for k in kmers)

    def test_random_bases(self):
        seq = random_bases(100, rng=np.random.default_rng(0))
        assert len(seq) == 100
        assert set(seq) <= set("ACGT")

    def test_quality_string(self):
        assert quality_string(3) == "???"


class TestGenomeStore:
    """Test the reference genome store."""

    def test_from_sequences(self):
        genome = GenomeStore.from_sequences(["acgt", "GGGGGG"])
        assert len(genome) == 2
        assert genome[0] == "ACGT"
        assert genome.names == ("seq_1", "seq_2")
        assert genome.lengths == (4, 6)
        assert genome.total_length == 10
        assert list(genome) == ["ACGT", "GGGGGG"]

    def test_name_count_mismatch(self):
        with pytest.raises(ValueError):
            GenomeStore(["a"], ["ACGT", "ACGT"])

    def test_from_fasta(self, tmp_path):
        fasta = tmp_path / "ref.fa"
        fasta.write_text(">chr1 first\nACGT\nacgt\n>chr2\nGGRT\n")
        genome = GenomeStore.from_fasta(fasta)
        assert genome.names == ("chr1", "chr2")
        assert genome[0] == "ACGTACGT"
        # Non ACGTN characters become N
        assert genome[1] == "GGNT"

    def test_from_gzipped_fasta(self, tmp_path):
        fasta = tmp_path / "ref.fa.gz"
        with gzip.open(fasta, "wt") as f:
            f.write(">chr1\nACGTACGT\n")
        genome = GenomeStore.from_fasta(fasta)
        assert genome.total_length == 8

    def test_empty_fasta(self, tmp_path):
        fasta = tmp_path / "empty.fa"
        fasta.write_text("")
        with pytest.raises(ValueError):
            GenomeStore.from_fasta(fasta)


class TestRandomness:

    def test_set_seed(self):
        from pseudoseq.simulate.seqsim.randomness import get_rng, set_seed
        set_seed(123)
        a = random_bases(20)
        set_seed(123)
        b = random_bases(20)
        assert a == b
        rng = np.random.default_rng(0)
        assert get_rng(rng) is rng
