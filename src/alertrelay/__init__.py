"""
Alert Relay - Prometheus alerts to Telegram

Receives Alertmanager webhook notifications, renders them through
user supplied Jinja2 templates and delivers them to Telegram chats.
"""

__version__ = "0.1.0"
__author__ = "Alert Relay Team"
