"""
VCF-backed annotation engine.

Joins query variants with candidate records of an auxiliary VCF source,
copying INFO values across matched alternate alleles and filling unmatched
alleles with declared defaults.
"""

from pathlib import Path
from typing import Any, Collection, Iterable, Mapping, Optional, Sequence, Union

from eliot import log_message, start_action

from allelejoin.cache import BoundedCache, make_cache_key
from allelejoin.config import EngineSettings
from allelejoin.extraction import extract_value
from allelejoin.fields import FieldRegistry
from allelejoin.io import read_info_declarations
from allelejoin.matching import match_alleles
from allelejoin.models import AnnotationRecord, ContextWindow, FieldDescriptor, InfoDeclaration, VariantRecord


class VcfAnnotationEngine:
    """
    Annotates query variants with the INFO fields of an auxiliary VCF source.

    The engine is single-threaded: its cache and hit/miss counters are not
    synchronized, so give every worker its own instance.

    Example:
        >>> engine = VcfAnnotationEngine("gnomAD", "4.1", Path("gnomad.sites.vcf.gz"))
        >>> records = engine.annotate(query, context, candidates)
        >>> records[0]["gnomAD_AF"]
        '0.0012'
        >>> engine.close()
    """

    def __init__(
        self,
        name: str,
        version: str,
        source_path: Union[str, Path],
        overrides: Optional[Mapping[str, str]] = None,
        settings: Optional[EngineSettings] = None,
    ):
        """
        Read the field declarations of the source and build the engine.

        Args:
            name: Logical name of the source, used as the field name prefix
            version: Version of the source, reported at shutdown
            source_path: VCF/BCF file whose header declares the INFO fields
            overrides: Replacement default values keyed by namespaced field name
            settings: Cache settings; defaults come from the environment

        Raises:
            HeaderError: If the source header cannot be read
        """
        declarations = read_info_declarations(source_path)
        self._setup(name, version, Path(source_path), declarations, overrides, settings)

    @classmethod
    def from_declarations(
        cls,
        name: str,
        version: str,
        declarations: Iterable[InfoDeclaration],
        overrides: Optional[Mapping[str, str]] = None,
        settings: Optional[EngineSettings] = None,
        source_path: Optional[Union[str, Path]] = None,
    ) -> "VcfAnnotationEngine":
        """Build an engine from INFO declarations that were already read."""
        engine = cls.__new__(cls)
        engine._setup(name, version, Path(source_path) if source_path is not None else None,
                      list(declarations), overrides, settings)
        return engine

    def _setup(
        self,
        name: str,
        version: str,
        source_path: Optional[Path],
        declarations: Sequence[InfoDeclaration],
        overrides: Optional[Mapping[str, str]],
        settings: Optional[EngineSettings],
    ) -> None:
        if not name:
            raise ValueError("Annotation source name cannot be empty.")
        with start_action(action_type="create_vcf_annotation_engine",
                          name=name, version=version,
                          source_path=str(source_path) if source_path else None) as action:
            self._name = name
            self._version = version
            self._source_path = source_path
            self._settings = settings if settings is not None else EngineSettings()
            self._registry = FieldRegistry(name, declarations, overrides)

            self._cache: BoundedCache = BoundedCache(self._settings.cache_capacity, self._settings.cache_policy)
            self._cache_hits = 0
            self._cache_misses = 0
            self._closed = False

            if len(self._registry) == 0:
                action.log(
                    message_type="warning",
                    step="no_supported_fields",
                    name=name,
                    source_path=str(source_path) if source_path else None,
                    reason="nothing to annotate from this source",
                )
            action.add_success_fields(
                num_fields=len(self._registry),
                cache_capacity=self._settings.cache_capacity,
                cache_policy=self._settings.cache_policy.value,
                cache_keys=self._settings.cache_keys.value,
            )

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    @property
    def source_path(self) -> Optional[Path]:
        return self._source_path

    @property
    def registry(self) -> FieldRegistry:
        return self._registry

    @property
    def cache(self) -> BoundedCache:
        return self._cache

    @property
    def cache_hits(self) -> int:
        return self._cache_hits

    @property
    def cache_misses(self) -> int:
        return self._cache_misses

    def supported_fields(self) -> tuple[str, ...]:
        """Namespaced names of every field this engine produces, in output order."""
        return self._registry.supported_fields()

    def field_descriptor(self, name: str) -> FieldDescriptor:
        return self._registry.descriptor(name)

    def annotate(
        self,
        query: VariantRecord,
        context: Optional[ContextWindow] = None,
        candidates: Iterable[Optional[VariantRecord]] = (),
        gene_annotations: Optional[Sequence[Any]] = None,
    ) -> list[AnnotationRecord]:
        """
        Annotate every alternate allele of ``query`` from the candidate records.

        Candidates are expected to be already restricted to the query locus;
        ``None`` entries are skipped. For each query allele the first matching
        candidate allele (in candidate order) provides the values; alleles
        with no match receive the default of every field. ``gene_annotations``
        is accepted for interface compatibility and ignored.

        Returns:
            One AnnotationRecord per query alternate allele, in ALT order, or
            an empty list when the source declares no fields
        """
        candidates = tuple(candidates)
        key = make_cache_key(query, context, candidates, self._settings.cache_keys)
        cached = self._cache.get(key)
        if cached is not None:
            self._cache_hits += 1
            return list(cached)

        if len(self._registry) == 0:
            result: list[AnnotationRecord] = []
        else:
            matched: dict[int, AnnotationRecord] = {}
            for candidate in candidates:
                if candidate is None:
                    continue
                for query_index, candidate_index in match_alleles(query, candidate):
                    if query_index in matched:
                        continue
                    matched[query_index] = self._annotation_from_candidate(
                        query, candidate, query_index, candidate_index
                    )

            defaults = {r.allele_index: r for r in self.defaults_for(query, matched.keys())}
            result = [
                matched[i] if i in matched else defaults[i]
                for i in range(len(query.alts))
            ]

        self._cache_misses += 1
        self._cache.put(key, tuple(result))
        return result

    def annotate_defaults(
        self,
        query: VariantRecord,
        context: Optional[ContextWindow] = None,
    ) -> list[AnnotationRecord]:
        """Default-valued records for every alternate allele, for sites with no candidates at all."""
        return self.defaults_for(query, ())

    def defaults_for(self, query: VariantRecord, matched_alt_indices: Collection[int]) -> list[AnnotationRecord]:
        """Default-valued records for the query alleles whose index is not in ``matched_alt_indices``."""
        if len(self._registry) == 0:
            return []
        return [
            AnnotationRecord(
                allele=allele,
                allele_index=i,
                data_source=self._name,
                field_values=self._registry.defaults(),
            )
            for i, allele in enumerate(query.alts)
            if i not in matched_alt_indices
        ]

    def _annotation_from_candidate(
        self,
        query: VariantRecord,
        candidate: VariantRecord,
        query_index: int,
        candidate_index: int,
    ) -> AnnotationRecord:
        values = self._registry.defaults()
        for raw_name, raw_value in candidate.info.items():
            descriptor = self._registry.descriptor_for_raw(raw_name)
            if descriptor is None:
                continue
            values[descriptor.name] = extract_value(
                descriptor,
                raw_value,
                candidate_index,
                query_is_biallelic=query.is_biallelic,
                candidate_is_biallelic=candidate.is_biallelic,
            )
        return AnnotationRecord(
            allele=query.alts[query_index],
            allele_index=query_index,
            data_source=self._name,
            field_values=values,
        )

    def cache_summary(self) -> str:
        total = self._cache_hits + self._cache_misses
        return f"{self._name} {self._version} cache hits/total: {self._cache_hits}/{total}"

    def close(self) -> None:
        """Log the cache hit summary. Subsequent calls do nothing."""
        if self._closed:
            return
        self._closed = True
        log_message(message_type="allelejoin:engine:closed", summary=self.cache_summary())

    def __enter__(self) -> "VcfAnnotationEngine":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return (f"{self.__class__.__name__}(name='{self._name}', version='{self._version}', "
                f"fields={len(self._registry)})")
