"""Helm chart and release models."""

from kubesnap.models.charts.helm_release import HelmRelease

__all__ = ["HelmRelease"]
