from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol


@dataclass(frozen=True)
class ClusterInfo:
    cluster_id: int
    cluster_name: str
    domain_id: int
    domain_name: str


@dataclass(frozen=True)
class DomainInfo:
    domain_id: int
    domain_name: str
    clusters: Mapping[int, str]


class TaxonomyProvider(Protocol):
    version: str

    def domains(self) -> tuple[DomainInfo, ...]:
        """Return domains in document order."""

    def cluster(self, cluster_id: int) -> ClusterInfo | None:
        """Return the cluster and its owning domain, or None when unknown."""

    def has_cluster(self, cluster_id: int) -> bool: ...
