"""Access parser - service accounts, roles, role bindings and CRDs."""

from __future__ import annotations

from typing import Any

from kubesnap.controllers.cluster.parsers.common import (
    as_list,
    created_at,
    metadata_of,
    resource_id,
    section,
)
from kubesnap.models.core.access_info import (
    RoleBindingSummary,
    RoleSummary,
    ServiceAccountSummary,
)
from kubesnap.models.core.cluster_info import CustomResourceDefinitionSummary


class AccessParser:
    """Parses RBAC resources and cluster-scoped definitions."""

    def __init__(self, context: str, namespace: str | None = None) -> None:
        self.context = context
        self.namespace = namespace

    def parse_service_account(self, item: dict[str, Any]) -> ServiceAccountSummary:
        return ServiceAccountSummary(
            id=resource_id(item, self.context, self.namespace, "ServiceAccount"),
            name=str(metadata_of(item).get("name", "")),
            secret_count=len(as_list(item.get("secrets"))),
            created_at=created_at(item),
        )

    def parse_role(self, item: dict[str, Any]) -> RoleSummary:
        return RoleSummary(
            id=resource_id(item, self.context, self.namespace, "Role"),
            name=str(metadata_of(item).get("name", "")),
            rule_count=len(as_list(item.get("rules"))),
            created_at=created_at(item),
        )

    def parse_role_binding(self, item: dict[str, Any]) -> RoleBindingSummary:
        role_ref = section(item, "roleRef")
        return RoleBindingSummary(
            id=resource_id(item, self.context, self.namespace, "RoleBinding"),
            name=str(metadata_of(item).get("name", "")),
            subject_count=len(as_list(item.get("subjects"))),
            role_ref=f"{role_ref.get('kind', '')}/{role_ref.get('name', '')}",
            created_at=created_at(item),
        )

    def parse_crd(self, item: dict[str, Any]) -> CustomResourceDefinitionSummary:
        spec = section(item, "spec")
        names = section(spec, "names")
        versions = [v for v in as_list(spec.get("versions")) if isinstance(v, dict)]
        version = versions[0].get("name") if versions else spec.get("version")
        return CustomResourceDefinitionSummary(
            id=resource_id(item, self.context, None, "CustomResourceDefinition"),
            name=str(metadata_of(item).get("name", "")),
            group=str(spec.get("group") or ""),
            version=str(version or ""),
            kind=str(names.get("kind") or ""),
            scope=str(spec.get("scope") or ""),
            short_names=[str(n) for n in as_list(names.get("shortNames"))],
            created_at=created_at(item),
        )
