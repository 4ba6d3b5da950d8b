"""
Allele matching between a query variant and a candidate from an annotation source.

Multi-allelic sites are compared by splitting both records into one biallelic
(ref, alt) pair per alternate allele and normalizing each pair, so that e.g. the
second allele of ``ATT > AT,A`` is recognized as the same deletion as ``AT > A``.
"""

from typing import NamedTuple

from allelejoin.models import VariantRecord


class BiallelicPair(NamedTuple):
    """A normalized reference/alternate allele pair. Only alleles are kept."""

    ref: str
    alt: str


def is_symbolic(allele: str) -> bool:
    """True for symbolic (``<DEL>``), breakend, spanning-deletion (``*``) and missing (``.``) alleles."""
    return (
        allele in ("*", ".")
        or allele.startswith("<")
        or "[" in allele
        or "]" in allele
        or allele.startswith(".")
        or allele.endswith(".")
    )


def trim_alleles(ref: str, alt: str) -> BiallelicPair:
    """
    Normalize a ref/alt pair by removing shared trailing, then shared leading bases.

    At least one base always remains in each allele, so indels keep their
    anchoring base. Symbolic alleles and single-base pairs are returned as is.
    Comparison is exact: no case folding.
    """
    if (len(ref) == 1 and len(alt) == 1) or is_symbolic(ref) or is_symbolic(alt):
        return BiallelicPair(ref, alt)

    end_ref, end_alt = len(ref), len(alt)
    while end_ref > 1 and end_alt > 1 and ref[end_ref - 1] == alt[end_alt - 1]:
        end_ref -= 1
        end_alt -= 1

    start = 0
    while end_ref - start > 1 and end_alt - start > 1 and ref[start] == alt[start]:
        start += 1

    return BiallelicPair(ref[start:end_ref], alt[start:end_alt])


def split_into_biallelics(record: VariantRecord) -> list[BiallelicPair]:
    """
    One normalized pair per alternate allele, in ALT order.

    Every pair combines the record's reference allele with one alternate allele.
    INFO values are ignored, so this stays cheap for repeated calls.
    """
    return [trim_alleles(record.ref, alt) for alt in record.alts]


def match_alleles(query: VariantRecord, candidate: VariantRecord) -> list[tuple[int, int]]:
    """
    Find all (query alt index, candidate alt index) pairs describing the same allele.

    Biallelic records are compared directly on their reference and sole
    alternate allele. Otherwise both records are split and normalized and every
    pair is compared with every other. Matches are not deduplicated: a query
    allele equal to two candidate alleles yields two entries.

    Both records are assumed to be at the same or overlapping locus; no
    position check is done here.
    """
    if query.is_biallelic and candidate.is_biallelic:
        if query.alts[0] == candidate.alts[0] and query.ref == candidate.ref:
            return [(0, 0)]
        return []

    query_pairs = split_into_biallelics(query)
    candidate_pairs = split_into_biallelics(candidate)

    return [
        (i, j)
        for i, query_pair in enumerate(query_pairs)
        for j, candidate_pair in enumerate(candidate_pairs)
        if query_pair == candidate_pair
    ]
