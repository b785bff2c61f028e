"""kubesnap - resilient kubectl/helm client producing cluster snapshots."""

__version__ = "0.1.0"
