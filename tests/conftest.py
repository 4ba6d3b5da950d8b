from pathlib import Path
from typing import Callable, Iterable

import pytest
from eliot import add_destinations, remove_destination
from pycomfort.logging import to_nice_stdout

from allelejoin.models import InfoDeclaration

VCF_COLUMNS = "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO"


@pytest.fixture(scope="session", autouse=True)
def setup_logging():
    """Render eliot messages for all tests."""
    to_nice_stdout()
    yield


@pytest.fixture
def eliot_messages():
    """Collect eliot messages emitted during a test."""
    messages: list[dict] = []
    destination = messages.append
    add_destinations(destination)
    yield messages
    remove_destination(destination)


@pytest.fixture
def write_vcf(tmp_path: Path) -> Callable[..., Path]:
    """Write a minimal VCF with the given INFO header lines and data lines."""
    def _write(info_lines: Iterable[str], records: Iterable[str] = (), name: str = "source.vcf") -> Path:
        path = tmp_path / name
        lines = ["##fileformat=VCFv4.2", "##contig=<ID=1,length=249250621>"]
        lines.extend(info_lines)
        lines.append(VCF_COLUMNS)
        lines.extend(records)
        path.write_text("\n".join(lines) + "\n")
        return path
    return _write


@pytest.fixture
def declarations() -> list[InfoDeclaration]:
    """Declarations in non-alphabetical order, covering every count type."""
    return [
        InfoDeclaration(id="DP", number=1, type="Integer", description="Read depth"),
        InfoDeclaration(id="AF", number="A", type="Float", description="Allele frequency"),
        InfoDeclaration(id="SOMATIC", number=0, type="Flag", description="Somatic site"),
        InfoDeclaration(id="AD", number="R", type="Integer", description="Allelic depths"),
        InfoDeclaration(id="GL", number="G", type="Float", description="Genotype likelihoods"),
        InfoDeclaration(id="CSQ", number=".", type="String", description="Consequences"),
    ]
