from pathlib import Path
from typing import Union

import pysam
from eliot import start_action

from allelejoin.models import InfoDeclaration, VariantRecord


class HeaderError(ValueError):
    """Raised when the auxiliary source does not carry a readable VCF header."""


def read_info_declarations(file_path: Union[str, Path]) -> list[InfoDeclaration]:
    """
    Read the ``##INFO`` declarations of a VCF/BCF file, in declaration order.

    Only the header is parsed; no records are read.

    Args:
        file_path: Path to a .vcf, .vcf.gz or .bcf file

    Returns:
        One InfoDeclaration per INFO header line

    Raises:
        HeaderError: If the file is missing or its header is not a valid VCF header
    """
    with start_action(action_type="read_info_declarations", file_path=str(file_path)) as action:
        try:
            with pysam.VariantFile(str(file_path)) as variant_file:
                declarations = [
                    InfoDeclaration(
                        id=key,
                        number=meta.number,
                        type=meta.type,
                        description=meta.description or "",
                    )
                    for key, meta in variant_file.header.info.items()
                ]
        except (OSError, ValueError) as e:
            raise HeaderError(f"{file_path} does not have a valid VCF header: {e}") from e

        action.add_success_fields(num_declarations=len(declarations))
        return declarations


def record_from_pysam(record: "pysam.VariantRecord") -> VariantRecord:
    """
    Convert a pysam record into a VariantRecord.

    pysam positions are 0-based half-open, VariantRecord is 1-based inclusive.
    Missing ALT (``.``) is not representable and raises a ValueError.
    """
    if not record.alts:
        raise ValueError(f"Record at {record.chrom}:{record.pos} has no alternate alleles")
    return VariantRecord(
        contig=record.chrom,
        start=record.pos,
        end=record.stop,
        ref=record.ref,
        alts=tuple(record.alts),
        info=dict(record.info.items()),
    )
