from typing import Any

from eliot import log_message

from allelejoin.models import CountType, FieldDescriptor, RawValue


def value_to_string(value: Any) -> str:
    """Render a single INFO value. Booleans follow the VCF ``true``/``false`` spelling."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "."
    return str(value)


def join_values(values: Any) -> str:
    return ",".join(value_to_string(v) for v in values)


def extract_value(
    descriptor: FieldDescriptor,
    raw_value: RawValue,
    candidate_alt_index: int,
    query_is_biallelic: bool,
    candidate_is_biallelic: bool,
) -> str:
    """
    Derive the string emitted for one field of a matched candidate allele.

    Scalars are returned as their string form. Collections are joined verbatim
    when both records are biallelic, since there is nothing to disambiguate.
    Otherwise ``Number=A`` fields yield the element of the matched allele and
    ``Number=R`` fields the element after it (slot 0 is the reference, which is
    never emitted). All other count types are joined whole.

    Args:
        descriptor: The declared field
        raw_value: Value of the field in the candidate's INFO
        candidate_alt_index: Index of the matched allele among the candidate's ALTs
        query_is_biallelic: Whether the query record has a single ALT
        candidate_is_biallelic: Whether the candidate record has a single ALT

    Returns:
        The value to store in the annotation record. Malformed collections that
        are too short for the requested index yield the field default.
    """
    if raw_value is None:
        return descriptor.default
    if not isinstance(raw_value, (list, tuple)):
        return value_to_string(raw_value)

    if query_is_biallelic and candidate_is_biallelic:
        return join_values(raw_value)

    if descriptor.count_type in (CountType.A, CountType.R):
        index = candidate_alt_index
        if descriptor.count_type == CountType.R:
            index += 1
        if 0 <= index < len(raw_value):
            return value_to_string(raw_value[index])
        log_message(
            message_type="warning",
            step="index_out_of_range",
            field=descriptor.name,
            count_type=descriptor.count_type.value,
            index=index,
            num_values=len(raw_value),
        )
        return descriptor.default

    return join_values(raw_value)
