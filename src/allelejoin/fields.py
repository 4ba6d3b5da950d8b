"""
Field registry: the namespaced, sorted set of output fields of one annotation source.
"""

from collections import OrderedDict
from typing import Iterable, Iterator, Mapping, Optional

import polars as pl

from allelejoin.models import CountType, FieldDescriptor, InfoDeclaration


def create_final_field_name(source_name: str, field_name: str) -> str:
    """Namespace a raw INFO field name with the name of its annotation source."""
    return f"{source_name}_{field_name}"


def _descriptor_from_declaration(source_name: str, declaration: InfoDeclaration) -> FieldDescriptor:
    count_type = CountType.from_number(declaration.number)
    count: Optional[int] = None
    if count_type == CountType.FIXED:
        count = int(declaration.number)
    return FieldDescriptor(
        raw_name=declaration.id,
        name=create_final_field_name(source_name, declaration.id),
        value_type=declaration.type,
        count_type=count_type,
        count=count,
        description=declaration.description,
        default="false" if declaration.type == "Flag" else "",
    )


class FieldRegistry:
    """
    Immutable set of output fields derived from the INFO declarations of a source.

    Fields are ordered by raw INFO name, not by declaration order. Defaults are
    ``"false"`` for Flag fields and ``""`` for everything else, unless replaced
    by an override keyed on the namespaced name. Override keys that do not name
    a known field are ignored.
    """

    def __init__(
        self,
        source_name: str,
        declarations: Iterable[InfoDeclaration],
        overrides: Optional[Mapping[str, str]] = None,
    ):
        self._source_name = source_name

        by_raw_name = {declaration.id: declaration for declaration in declarations}
        descriptors: "OrderedDict[str, FieldDescriptor]" = OrderedDict()
        for raw_name in sorted(by_raw_name):
            descriptor = _descriptor_from_declaration(source_name, by_raw_name[raw_name])
            descriptors[descriptor.name] = descriptor

        if descriptors and overrides:
            for name, value in overrides.items():
                if name in descriptors:
                    descriptors[name] = descriptors[name].model_copy(update={"default": str(value)})

        self._descriptors = descriptors
        self._defaults = OrderedDict((name, d.default) for name, d in descriptors.items())

    @property
    def source_name(self) -> str:
        return self._source_name

    def supported_fields(self) -> tuple[str, ...]:
        """Namespaced field names in registry order."""
        return tuple(self._descriptors)

    def descriptor(self, name: str) -> FieldDescriptor:
        """Look up a field by its namespaced name. Raises KeyError for unknown names."""
        return self._descriptors[name]

    def descriptor_for_raw(self, raw_name: str) -> Optional[FieldDescriptor]:
        return self._descriptors.get(create_final_field_name(self._source_name, raw_name))

    def defaults(self) -> "OrderedDict[str, str]":
        """A fresh, mutable copy of the default value of every field."""
        return OrderedDict(self._defaults)

    def header_lines(self) -> list[str]:
        """Renamed ``##INFO`` lines for merging into a downstream VCF header."""
        lines = []
        for d in self._descriptors.values():
            description = d.description.replace("\\", "\\\\").replace('"', '\\"')
            lines.append(
                f'##INFO=<ID={d.name},Number={d.number},Type={d.value_type},Description="{description}">'
            )
        return lines

    def to_frame(self) -> pl.DataFrame:
        """One row per field: name, raw name, type, count type, number, default and description."""
        return pl.DataFrame(
            {
                "name": [d.name for d in self._descriptors.values()],
                "raw_name": [d.raw_name for d in self._descriptors.values()],
                "type": [d.value_type for d in self._descriptors.values()],
                "count_type": [d.count_type.value for d in self._descriptors.values()],
                "number": [d.number for d in self._descriptors.values()],
                "default": [d.default for d in self._descriptors.values()],
                "description": [d.description for d in self._descriptors.values()],
            },
            schema={
                "name": pl.Utf8,
                "raw_name": pl.Utf8,
                "type": pl.Utf8,
                "count_type": pl.Utf8,
                "number": pl.Utf8,
                "default": pl.Utf8,
                "description": pl.Utf8,
            },
        )

    def __contains__(self, name: object) -> bool:
        return name in self._descriptors

    def __len__(self) -> int:
        return len(self._descriptors)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self._descriptors.values())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(source='{self._source_name}', fields={len(self)})"
