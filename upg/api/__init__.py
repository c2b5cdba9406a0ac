"""Caller-facing API."""

from upg.api.facade import UPG

__all__ = ["UPG"]
