"""Switchyard - multi-agent dispatch layer.

Routes requests to specialist handlers, enforces the approval policy on
risky actions, and orchestrates composite tasks across parallel workers.
"""

__version__ = "0.1.0"
