"""
Data model shared by the matching, extraction and engine layers.

All records are pydantic models. Variant records and context windows are frozen
so they can be safely reused as cache keys and shared between calls.
"""

from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Scalar = Union[str, int, float, bool, None]
RawValue = Union[Scalar, Tuple[Scalar, ...]]


class CountType(str, Enum):
    """Cardinality of an INFO field relative to the alleles of a site (VCF ``Number``)."""

    A = "A"
    """One value per alternate allele."""
    R = "R"
    """One value per allele, reference first."""
    G = "G"
    """One value per possible genotype."""
    FIXED = "FIXED"
    """A fixed integer number of values (or a scalar)."""
    VARIABLE = "VARIABLE"
    """Unbounded number of values (``.``)."""

    @classmethod
    def from_number(cls, number: Union[str, int, None]) -> "CountType":
        """Map a VCF header ``Number`` to a count type."""
        if isinstance(number, int):
            return cls.FIXED
        if number in ("A", "R", "G"):
            return cls(number)
        if number is None or number == ".":
            return cls.VARIABLE
        if isinstance(number, str) and number.isdigit():
            return cls.FIXED
        raise ValueError(f"Unsupported INFO Number: {number!r}")


class ContextWindow(BaseModel):
    """Reference context surrounding a query variant. Only used as part of the cache key."""

    model_config = ConfigDict(frozen=True)

    contig: str
    start: int
    end: int
    bases: str = ""


class VariantRecord(BaseModel):
    """
    A single variant site: locus, reference allele, ordered alternate alleles and raw INFO values.

    Coordinates are 1-based and inclusive. If ``end`` is omitted it is derived from
    the length of the reference allele. List values in ``info`` are stored as tuples.
    """

    model_config = ConfigDict(frozen=True)

    contig: str
    start: int = Field(ge=1)
    end: int = 0
    ref: str = Field(min_length=1)
    alts: Tuple[str, ...] = Field(min_length=1)
    info: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _fill_end(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("end"):
            ref = data.get("ref") or ""
            try:
                start = int(data.get("start"))
            except (TypeError, ValueError):
                return data
            data = {**data, "end": start + max(len(ref), 1) - 1}
        return data

    @field_validator("info")
    @classmethod
    def _freeze_collections(cls, value: Dict[str, Any]) -> Dict[str, Any]:
        return {
            key: tuple(raw) if isinstance(raw, (list, tuple)) else raw
            for key, raw in value.items()
        }

    @property
    def is_biallelic(self) -> bool:
        return len(self.alts) == 1

    def content_key(self) -> tuple:
        """Hashable structural identity of this record (locus, alleles and INFO)."""
        return (
            self.contig,
            self.start,
            self.end,
            self.ref,
            self.alts,
            tuple(sorted(self.info.items(), key=lambda item: item[0])),
        )


class InfoDeclaration(BaseModel):
    """One ``##INFO`` declaration as read from the auxiliary source header."""

    model_config = ConfigDict(frozen=True)

    id: str
    number: Union[int, str, None] = "."
    type: str = "String"
    description: str = ""


class FieldDescriptor(BaseModel):
    """Metadata of one output field produced from a single INFO declaration."""

    model_config = ConfigDict(frozen=True)

    raw_name: str
    name: str
    value_type: str
    count_type: CountType
    count: Optional[int] = None
    description: str = ""
    default: str = ""

    @property
    def is_flag(self) -> bool:
        return self.value_type == "Flag"

    @property
    def number(self) -> str:
        """The VCF ``Number`` of this field as written in a header line."""
        if self.count_type == CountType.FIXED:
            return str(self.count if self.count is not None else 1)
        if self.count_type == CountType.VARIABLE:
            return "."
        return self.count_type.value


class AnnotationRecord(BaseModel):
    """
    Field values for one query alternate allele, in registry order.

    ``field_values`` is a read-only mapping, so records can be shared by the result cache.
    """

    model_config = ConfigDict(frozen=True)

    allele: str
    allele_index: int
    data_source: str
    field_values: Mapping[str, str]

    @field_validator("field_values")
    @classmethod
    def _read_only_values(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    def get(self, field_name: str, default: Optional[str] = None) -> Optional[str]:
        return self.field_values.get(field_name, default)

    def __getitem__(self, field_name: str) -> str:
        return self.field_values[field_name]
