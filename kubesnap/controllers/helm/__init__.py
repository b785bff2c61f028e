"""Helm controller package."""

from kubesnap.controllers.helm.controller import HelmController, parse_helm_timestamp

__all__ = ["HelmController", "parse_helm_timestamp"]
