"""Tests for tabulating annotation records with polars."""

import polars as pl

from allelejoin import InfoDeclaration, VariantRecord, VcfAnnotationEngine, annotations_to_frame


def test_annotations_to_frame(declarations: list[InfoDeclaration]):
    engine = VcfAnnotationEngine.from_declarations("SRC", "1.0", declarations)
    query = VariantRecord(contig="1", start=5, ref="A", alts=("C", "G"))
    candidate = VariantRecord(contig="1", start=5, ref="A", alts=("G",), info={"AF": (0.3,), "DP": 12})

    frame = annotations_to_frame(engine.annotate(query, None, [candidate]))

    assert frame.columns[:3] == ["data_source", "allele_index", "allele"]
    assert frame.columns[3:] == list(engine.supported_fields())
    assert frame["allele"].to_list() == ["C", "G"]
    assert frame["SRC_AF"].to_list() == ["", "0.3"]
    assert frame["SRC_DP"].to_list() == ["", "12"]
    assert frame.schema["SRC_AF"] == pl.Utf8


def test_empty_frame_keeps_schema(declarations: list[InfoDeclaration]):
    engine = VcfAnnotationEngine.from_declarations("SRC", "1.0", declarations)
    frame = annotations_to_frame([], engine.supported_fields())
    assert frame.height == 0
    assert frame.columns[3:] == list(engine.supported_fields())
