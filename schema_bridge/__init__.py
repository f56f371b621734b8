"""
schema-bridge - Reconcile two JSON schemas.

Suggests field correspondences between two schema trees, stores accepted
correspondences as reusable mapping configurations, and applies them to
reshape payloads from one schema into the other.
"""

__version__ = "0.1.0"
