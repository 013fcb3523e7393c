from __future__ import annotations

import json
from pathlib import Path
from types import MappingProxyType
from typing import Any

from .provider import ClusterInfo, DomainInfo, TaxonomyProvider


class LocalTaxonomy(TaxonomyProvider):
    """Two-level domain -> cluster taxonomy loaded from a versioned JSON document."""

    def __init__(self, taxonomy_path: str | Path | None = None) -> None:
        path = Path(taxonomy_path) if taxonomy_path else Path(__file__).with_name("taxonomy.json")
        raw = self._load_document(path)
        self.version = str(raw.get("version") or "unversioned")
        self._domains, self._clusters = self._build(raw, path)

    @staticmethod
    def _load_document(path: Path) -> dict[str, Any]:
        with path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        if not isinstance(raw, dict) or not isinstance(raw.get("domains"), list):
            raise RuntimeError(f"Invalid taxonomy document '{path}': expected a 'domains' list.")
        return raw

    @staticmethod
    def _build(raw: dict[str, Any], path: Path) -> tuple[tuple[DomainInfo, ...], MappingProxyType]:
        domains: list[DomainInfo] = []
        clusters: dict[int, ClusterInfo] = {}
        for entry in raw["domains"]:
            domain_id = int(entry["id"])
            domain_name = str(entry["domain"])
            names: dict[int, str] = {}
            for item in entry.get("clusters", []):
                cluster_id = int(item["id"])
                if cluster_id in clusters:
                    raise RuntimeError(f"Invalid taxonomy document '{path}': duplicate cluster id {cluster_id}.")
                names[cluster_id] = str(item["cluster"])
                clusters[cluster_id] = ClusterInfo(
                    cluster_id=cluster_id,
                    cluster_name=names[cluster_id],
                    domain_id=domain_id,
                    domain_name=domain_name,
                )
            domains.append(DomainInfo(domain_id=domain_id, domain_name=domain_name, clusters=MappingProxyType(names)))
        return tuple(domains), MappingProxyType(clusters)

    def domains(self) -> tuple[DomainInfo, ...]:
        return self._domains

    def cluster(self, cluster_id: int) -> ClusterInfo | None:
        return self._clusters.get(cluster_id)

    def has_cluster(self, cluster_id: int) -> bool:
        return cluster_id in self._clusters

    @property
    def cluster_count(self) -> int:
        return len(self._clusters)

    def as_document(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "domains": [
                {
                    "id": domain.domain_id,
                    "domain": domain.domain_name,
                    "clusters": [{"id": cid, "cluster": name} for cid, name in domain.clusters.items()],
                }
                for domain in self._domains
            ],
        }
