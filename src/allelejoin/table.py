from typing import Iterable, Optional, Sequence

import polars as pl

from allelejoin.models import AnnotationRecord


def annotations_to_frame(
    records: Iterable[AnnotationRecord],
    field_names: Optional[Sequence[str]] = None,
) -> pl.DataFrame:
    """
    Tabulate annotation records, one row per annotated allele.

    Args:
        records: Records as returned by VcfAnnotationEngine.annotate
        field_names: Field columns in output order. Taken from the first record when omitted,
            pass ``engine.supported_fields()`` to get a stable schema for empty results.

    Returns:
        DataFrame with ``data_source``, ``allele_index`` and ``allele`` followed by one Utf8 column per field
    """
    records = list(records)
    if field_names is None:
        field_names = list(records[0].field_values) if records else []

    columns = {
        "data_source": [r.data_source for r in records],
        "allele_index": [r.allele_index for r in records],
        "allele": [r.allele for r in records],
    }
    schema = {"data_source": pl.Utf8, "allele_index": pl.Int64, "allele": pl.Utf8}
    for name in field_names:
        columns[name] = [r.field_values.get(name) for r in records]
        schema[name] = pl.Utf8
    return pl.DataFrame(columns, schema=schema)
