"""Kubernetes usage logger: periodic, month-partitioned inventory snapshots."""
