"""
Contract Engine - Blueprint-to-Contract Lifecycle Core

Reusable document blueprints of positioned, typed fields are instantiated
into contracts that carry field values and move through a fixed approval
lifecycle (created → approved → sent → signed → locked, or revoked).
"""

__version__ = "0.1.0"
__author__ = "Contract Engine Team"
