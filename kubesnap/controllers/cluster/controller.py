"""Cluster controller for kubectl data operations.

This module serves as the main orchestrator for cluster data operations,
delegating to specialized fetchers and parsers for nodes, pods, events,
configuration, networking and access resources.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from functools import partial
from typing import Any

from kubesnap.constants.enums import ClusterHealth, WorkloadKind
from kubesnap.constants.timeouts import ENDPOINTS_REQUEST_TIMEOUT
from kubesnap.controllers.base import BaseController, CommandExecutor, FetchPlan, ProcessRunner
from kubesnap.controllers.cluster.enrichment import enrich_services
from kubesnap.controllers.cluster.fetchers import (
    ConfigFetcher,
    EventFetcher,
    NodeFetcher,
    PodFetcher,
    ResourceFetcher,
    sort_by_name,
)
from kubesnap.controllers.cluster.parsers import (
    WORKLOAD_RESOURCES,
    AccessParser,
    ConfigParser,
    NetworkParser,
    NodeParser,
    PodParser,
    WorkloadParser,
    pod_key,
)
from kubesnap.controllers.cluster.parsers.common import metadata_of, section
from kubesnap.controllers.helm import HelmController
from kubesnap.models.charts.helm_release import HelmRelease
from kubesnap.models.command.errors import CommandError
from kubesnap.models.command.invocation import CommandInvocation
from kubesnap.models.core import (
    Cluster,
    ConfigResourcePermissions,
    ConfigResourceSummary,
    CustomResourceDefinitionSummary,
    NamespaceSnapshot,
    NodeData,
    NodeStatsSummary,
    PodDetail,
    WorkloadSummary,
)
from kubesnap.models.state.app_settings import ClientSettings
from kubesnap.utils.cache_manager import CacheManager
from kubesnap.utils.stable_identifier import IdentifierTable

logger = logging.getLogger(__name__)


class ClusterController(BaseController):
    """Aggregates kubectl queries into cluster, namespace and node snapshots."""

    def __init__(
        self,
        kubectl: CommandExecutor,
        helm: HelmController | None = None,
        settings: ClientSettings | None = None,
        cache_manager: CacheManager | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the cluster controller.

        Args:
            kubectl: Runner (or test double) for the kubectl executable.
            helm: Optional helm controller; releases are skipped without one.
            settings: Client settings; loaded from the environment when omitted.
            cache_manager: Cache owner; one is created from settings when omitted.
            clock: Monotonic clock handed to a newly created cache manager.
        """
        super().__init__()
        self.settings = settings or ClientSettings.from_env()
        self._kubectl = kubectl
        self._helm = helm
        self._identifiers = IdentifierTable()
        self._caches = cache_manager or CacheManager(
            node_stats_ttl=self.settings.node_stats_cache_ttl,
            permission_ttl=self.settings.secret_permission_cache_ttl,
            clock=clock,
        )

        self._resources = ResourceFetcher(kubectl, self.settings.request_timeout)
        self._node_fetcher = NodeFetcher(self._resources, self.settings.node_request_timeout)
        self._pod_fetcher = PodFetcher(self._resources)
        self._config_fetcher = ConfigFetcher(self._resources)

    @classmethod
    def from_settings(cls, settings: ClientSettings | None = None) -> ClusterController:
        """Controller backed by real kubectl and helm runners."""
        settings = settings or ClientSettings.from_env()
        return cls(
            ProcessRunner.for_kubectl(settings),
            helm=HelmController(ProcessRunner.for_helm(settings)),
            settings=settings,
        )

    @property
    def cache_manager(self) -> CacheManager:
        return self._caches

    async def check_connection(self) -> bool:
        """True when the kubectl client runs."""
        try:
            await self._resources.run_json(("version", "--client", "-o", "json"))
        except CommandError as exc:
            logger.debug("kubectl unavailable: %s", exc.message)
            return False
        return True

    # =========================================================================
    # Clusters
    # =========================================================================

    async def _load_kubeconfig(self) -> dict[str, Any]:
        payload = await self._resources.run_json(("config", "view", "-o", "json"))
        return payload if isinstance(payload, dict) else {}

    @staticmethod
    def _clusters_by_name(config: dict[str, Any]) -> dict[str, dict[str, Any]]:
        return {
            str(entry.get("name")): section(entry, "cluster")
            for entry in config.get("clusters") or []
            if isinstance(entry, dict) and entry.get("name")
        }

    @staticmethod
    def _contexts(config: dict[str, Any]) -> list[tuple[str, str]]:
        """(context name, cluster name) pairs."""
        return [
            (str(entry["name"]), str(section(entry, "context").get("cluster") or ""))
            for entry in config.get("contexts") or []
            if isinstance(entry, dict) and entry.get("name")
        ]

    def _cluster_from_kubeconfig(
        self, context: str, cluster_name: str, cluster: dict[str, Any]
    ) -> Cluster:
        return Cluster(
            id=self._identifiers.identifier_for(context),
            name=cluster_name,
            context_name=context,
            server=str(cluster.get("server") or ""),
            kubernetes_version=str(cluster.get("serverVersion") or ""),
            last_synced=datetime.now(timezone.utc),
        )

    async def load_clusters(self) -> list[Cluster]:
        """One cluster per kubeconfig context whose cluster entry exists."""
        config = await self._load_kubeconfig()
        clusters_by_name = self._clusters_by_name(config)
        results = [
            self._cluster_from_kubeconfig(context, cluster_name, clusters_by_name[cluster_name])
            for context, cluster_name in self._contexts(config)
            if cluster_name in clusters_by_name
        ]
        return sort_by_name(results)

    async def _lookup_cluster(self, context: str) -> Cluster:
        config = await self._load_kubeconfig()
        cluster_name = next(
            (cluster for name, cluster in self._contexts(config) if name == context), None
        )
        if cluster_name is None:
            raise CommandError(f"Context {context} not found in kubeconfig")
        cluster = self._clusters_by_name(config).get(cluster_name)
        if cluster is None:
            raise CommandError(f"Cluster information missing for context {context}")
        return self._cluster_from_kubeconfig(context, cluster_name, cluster)

    async def load_namespaces(self, context: str) -> list[str]:
        items = await self._resources.fetch_items(context, "namespaces")
        names = [str(metadata_of(item).get("name", "")) for item in items]
        return sorted((name for name in names if name), key=str.casefold)

    async def load_custom_resources(self, context: str) -> list[CustomResourceDefinitionSummary]:
        parser = AccessParser(context)
        return await self._resources.fetch_list(
            context, "customresourcedefinitions", parser.parse_crd
        )

    async def load_helm_releases(self, context: str) -> list[HelmRelease]:
        if self._helm is None:
            return []
        return await self._helm.list_releases(context)

    async def load_cluster_details(
        self,
        context: str,
        focus_namespace: str | None = None,
    ) -> Cluster:
        """Full cluster snapshot with one namespace loaded in detail.

        The kubeconfig entry and the namespace list are required; nodes,
        custom resources, helm releases and the focused namespace degrade.

        Raises:
            CommandError: unknown context, or a required query failed.
        """
        plan = (
            FetchPlan(f"cluster {context}", load_bearing=("kubeconfig", "namespaces"))
            .add("kubeconfig", partial(self._lookup_cluster, context))
            .add("namespaces", partial(self.load_namespaces, context))
            .add("node_data", partial(self.load_node_data, context), default=NodeData)
            .add("custom_resources", partial(self.load_custom_resources, context))
            .add("helm_releases", partial(self.load_helm_releases, context))
        )
        outcome = await self._run_plan(plan)
        cluster: Cluster = outcome["kubeconfig"]
        namespace_names: list[str] = outcome["namespaces"]
        node_data: NodeData = outcome["node_data"]

        health = ClusterHealth.HEALTHY
        notes: list[str] = []
        node_error = outcome.failures.get("node_data")
        if node_error is not None:
            health = ClusterHealth.DEGRADED
            notes.append(f"Nodes: {self._summarize_error(node_error)}")

        namespaces = [NamespaceSnapshot(name=name) for name in namespace_names]
        preferred = focus_namespace or (namespace_names[0] if namespace_names else None)
        if preferred:
            try:
                detailed = await self.load_namespace_details(context, preferred)
            except CommandError as exc:
                self._record_nonfatal_warning(f"cluster {context}:namespace {preferred}", exc)
            else:
                namespaces = [detailed if ns.name == detailed.name else ns for ns in namespaces]
                if detailed.has_unhealthy_workloads:
                    health = ClusterHealth.DEGRADED

        return cluster.model_copy(
            update={
                "health": health,
                "node_summary": node_data.summary,
                "nodes": node_data.nodes,
                "namespaces": namespaces,
                "notes": "\n".join(notes) or None,
                "is_connected": True,
                "helm_releases": outcome["helm_releases"],
                "custom_resources": outcome["custom_resources"],
                "last_synced": datetime.now(timezone.utc),
            }
        )

    # =========================================================================
    # Nodes
    # =========================================================================

    async def load_node_stats(
        self, context: str, node_names: Iterable[str]
    ) -> dict[str, NodeStatsSummary]:
        """Kubelet stats per node through the node-stats cache."""
        names = sorted({name for name in node_names if name})
        if not names:
            return {}
        cache = self._caches.node_stats(
            context, partial(self._node_fetcher.fetch_stats_summary, context)
        )
        return await cache.lookup(names)

    async def load_node_data(self, context: str) -> NodeData:
        """Node inventory with usage ratios and a cluster-wide summary."""
        plan = (
            FetchPlan(f"nodes {context}", load_bearing=("nodes",))
            .add("nodes", partial(self._node_fetcher.fetch_nodes, context))
            .add(
                "node_metrics",
                partial(self._node_fetcher.fetch_node_metrics, context),
                default=dict,
            )
        )
        outcome = await self._run_plan(plan)
        raw_nodes: list[dict[str, Any]] = outcome["nodes"]
        metrics = outcome["node_metrics"]

        names = [str(metadata_of(node).get("name", "")) for node in raw_nodes]
        stats = await self.load_node_stats(context, names)

        parser = NodeParser(context)
        nodes = sort_by_name(
            [
                parser.parse_node_info(node, metrics.get(name), stats.get(name))
                for node, name in zip(raw_nodes, names, strict=True)
            ]
        )
        return NodeData(summary=NodeParser.summarize(nodes), nodes=nodes)

    async def invalidate_node_cache(self, context: str | None = None) -> None:
        await self._caches.invalidate_node_stats(context)

    async def invalidate_permission_cache(self) -> None:
        await self._caches.invalidate_permissions()

    # =========================================================================
    # Namespaces
    # =========================================================================

    async def load_secret_permissions(
        self, context: str, namespace: str, secret_names: Iterable[str]
    ) -> dict[str, ConfigResourcePermissions]:
        """Permissions per secret through the permission cache.

        Secrets whose check failed are missing from the result.
        """
        names = sorted({name for name in secret_names if name})
        if not names:
            return {}
        cache = self._caches.secret_permissions(
            context,
            namespace,
            partial(self._config_fetcher.fetch_secret_permissions, context, namespace),
        )
        return await cache.lookup(names)

    async def _load_workloads(
        self, context: str, namespace: str, kind: WorkloadKind
    ) -> list[WorkloadSummary]:
        parser = WorkloadParser(context, namespace)
        return await self._resources.fetch_list(
            context, WORKLOAD_RESOURCES[kind], partial(parser.parse, kind), namespace=namespace
        )

    async def _load_endpoints(self, context: str, namespace: str) -> dict[str, list[str]]:
        items = await self._resources.fetch_items(
            context, "endpoints", namespace=namespace, request_timeout=ENDPOINTS_REQUEST_TIMEOUT
        )
        return NetworkParser.parse_endpoints(items)

    def _namespace_plan(
        self, context: str, namespace: str, load_bearing: Iterable[str]
    ) -> FetchPlan:
        network = NetworkParser(context, namespace)
        access = AccessParser(context, namespace)
        config = ConfigParser(context, namespace)
        events = EventFetcher(self._resources, context)
        listed: dict[str, Callable[[dict[str, Any]], Any]] = {
            "configmaps": config.parse_config_map,
            "resourcequotas": config.parse_resource_quota,
            "limitranges": config.parse_limit_range,
            "ingresses": network.parse_ingress,
            "persistentvolumeclaims": network.parse_pvc,
            "serviceaccounts": access.parse_service_account,
            "roles": access.parse_role,
            "rolebindings": access.parse_role_binding,
        }

        plan = FetchPlan(f"namespace {namespace}", load_bearing=load_bearing)
        for kind, resource in WORKLOAD_RESOURCES.items():
            plan.add(resource, partial(self._load_workloads, context, namespace, kind))
        plan.add("pods", partial(self._pod_fetcher.fetch_pods, context, namespace))
        plan.add(
            "pod_metrics",
            partial(self._pod_fetcher.fetch_pod_metrics, context, namespace),
            default=dict,
        )
        plan.add("events", partial(events.fetch_events, namespace))
        # Secrets and services are parsed after their follow-up lookups.
        for resource in ("secrets", "services"):
            plan.add(
                resource,
                partial(self._resources.fetch_items, context, resource, namespace=namespace),
            )
        plan.add("endpoints", partial(self._load_endpoints, context, namespace), default=dict)
        for resource, parse in listed.items():
            plan.add(
                resource,
                partial(self._resources.fetch_list, context, resource, parse, namespace),
            )
        return plan

    async def load_namespace_details(
        self,
        context: str,
        namespace: str,
        load_bearing: Iterable[str] = (),
    ) -> NamespaceSnapshot:
        """Every namespaced resource kind, fetched concurrently and merged.

        Args:
            context: Kubeconfig context.
            namespace: Namespace to load.
            load_bearing: Sub-query names (``"pods"``, ``"deployments"``, ...)
                whose failure fails the whole call instead of degrading.
        """
        outcome = await self._run_plan(self._namespace_plan(context, namespace, load_bearing))

        raw_pods: list[dict[str, Any]] = outcome["pods"]
        raw_secrets: list[dict[str, Any]] = outcome["secrets"]
        node_names = [str(section(pod, "spec").get("nodeName") or "") for pod in raw_pods]
        secret_names = [str(metadata_of(secret).get("name", "")) for secret in raw_secrets]
        stats, permissions = await asyncio.gather(
            self.load_node_stats(context, node_names),
            self.load_secret_permissions(context, namespace, secret_names),
        )

        disk_usage: dict[str, float] = {}
        for summary in stats.values():
            disk_usage.update(summary.pod_disk_usage)

        pod_parser = PodParser(context)
        metrics = outcome["pod_metrics"]
        pods = []
        for item in raw_pods:
            pod_name = str(metadata_of(item).get("name", ""))
            pod_namespace = str(metadata_of(item).get("namespace") or namespace)
            pods.append(
                pod_parser.parse_summary(
                    item,
                    namespace,
                    usage=metrics.get(pod_name),
                    disk_usage_bytes=disk_usage.get(pod_key(pod_namespace, pod_name)),
                )
            )
        pods = sort_by_name(pods)

        config_parser = ConfigParser(context, namespace)
        secrets = [
            config_parser.parse_secret(
                item,
                permissions.get(name, ConfigResourcePermissions.no_access()),
            )
            for item, name in zip(raw_secrets, secret_names, strict=True)
        ]
        config_resources: list[ConfigResourceSummary] = sort_by_name(
            [
                *outcome["configmaps"],
                *secrets,
                *outcome["resourcequotas"],
                *outcome["limitranges"],
            ]
        )

        network = NetworkParser(context, namespace)
        services = sort_by_name(
            [network.parse_service(item, outcome["endpoints"]) for item in outcome["services"]]
        )
        services = enrich_services(services, pods, outcome["events"])

        workloads: list[WorkloadSummary] = sort_by_name(
            [w for resource in WORKLOAD_RESOURCES.values() for w in outcome[resource]]
        )

        return NamespaceSnapshot(
            name=namespace,
            workloads=workloads,
            pods=pods,
            events=outcome["events"],
            alerts=[w.alert_message for w in workloads if w.alert_message],
            config_resources=config_resources,
            services=services,
            ingresses=outcome["ingresses"],
            persistent_volume_claims=outcome["persistentvolumeclaims"],
            service_accounts=outcome["serviceaccounts"],
            roles=outcome["roles"],
            role_bindings=outcome["rolebindings"],
            is_loaded=True,
            warnings=outcome.warnings,
        )

    async def load_pod_detail(self, context: str, namespace: str, pod: str) -> PodDetail:
        """Full detail of one pod; any failure propagates."""
        item = await self._pod_fetcher.fetch_pod(context, namespace, pod)
        return PodParser(context).parse_detail(item)

    # =========================================================================
    # Manifests
    # =========================================================================

    async def load_resource_yaml(
        self,
        context: str,
        kind: str,
        name: str,
        namespace: str | None = None,
    ) -> str:
        """Current manifest of one object as YAML text."""
        arguments = ["--context", context]
        if namespace:
            arguments.extend(["-n", namespace])
        arguments.extend(["get", kind, name, "-o", "yaml"])
        arguments.append(f"--request-timeout={self._resources.request_timeout}")
        return await self._resources.run(arguments)

    async def _apply_file(self, context: str, content: str, suffix: str) -> str:
        try:
            with tempfile.NamedTemporaryFile(
                "w", prefix="kubesnap-", suffix=suffix, delete=False, encoding="utf-8"
            ) as handle:
                handle.write(content)
                path = handle.name
        except OSError as exc:
            raise CommandError(f"Failed to write manifest: {exc}") from exc
        try:
            return await self._kubectl.run(
                CommandInvocation(arguments=("apply", "-f", path, "--context", context))
            )
        finally:
            try:
                os.remove(path)
            except OSError:
                logger.debug("Could not remove temporary manifest %s", path)

    async def apply_resource_yaml(self, context: str, manifest_yaml: str) -> str:
        """``kubectl apply`` a YAML manifest; returns kubectl's output."""
        if not manifest_yaml.strip():
            raise CommandError("Manifest is empty; nothing to apply.")
        return await self._apply_file(context, manifest_yaml, ".yaml")

    async def update_secret(
        self,
        context: str,
        namespace: str,
        name: str,
        encoded_data: dict[str, str],
        secret_type: str | None = None,
    ) -> str:
        """Replace a secret's data with already base64-encoded values."""
        manifest: dict[str, Any] = {
            "apiVersion": "v1",
            "kind": "Secret",
            "metadata": {"name": name, "namespace": namespace},
            "data": dict(encoded_data),
        }
        if secret_type:
            manifest["type"] = secret_type
        return await self._apply_file(context, json.dumps(manifest, indent=2), ".json")


__all__ = ["ClusterController"]
