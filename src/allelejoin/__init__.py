"""Top-level API for allelejoin.

Expose `VcfAnnotationEngine` as the primary entrypoint for annotating query
variants from an auxiliary VCF source.
"""

from allelejoin.cache import BoundedCache
from allelejoin.config import CacheKeying, CachePolicy, EngineSettings
from allelejoin.engine import VcfAnnotationEngine
from allelejoin.fields import FieldRegistry
from allelejoin.io import HeaderError, read_info_declarations, record_from_pysam
from allelejoin.matching import match_alleles, split_into_biallelics, trim_alleles
from allelejoin.models import (
    AnnotationRecord,
    ContextWindow,
    CountType,
    FieldDescriptor,
    InfoDeclaration,
    VariantRecord,
)
from allelejoin.table import annotations_to_frame

__all__ = [
    "VcfAnnotationEngine",
    "EngineSettings",
    "CachePolicy",
    "CacheKeying",
    "BoundedCache",
    "FieldRegistry",
    "HeaderError",
    "read_info_declarations",
    "record_from_pysam",
    "match_alleles",
    "split_into_biallelics",
    "trim_alleles",
    "AnnotationRecord",
    "ContextWindow",
    "CountType",
    "FieldDescriptor",
    "InfoDeclaration",
    "VariantRecord",
    "annotations_to_frame",
]
