"""Serialization of sample aggregates.

``benchrank.io.schema`` validates exported records; ``benchrank.io.records``
reads and writes them as JSON.
"""
