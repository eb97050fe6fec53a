"""Manage Helm chart repositories stored in Baidu Object Storage (BOS)."""
