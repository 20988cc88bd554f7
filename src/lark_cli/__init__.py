"""Lark CLI - auth requirement resolution for the Lark/Feishu workspace platform."""

__version__ = "0.3.0"
