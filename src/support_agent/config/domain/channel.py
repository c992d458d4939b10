"""Channel enumeration — the delivery surface a customer message arrived on."""

from enum import StrEnum


class Channel(StrEnum):
    """Closed set of delivery surfaces.

    A channel selects both the system prompt's tone/length rules and the
    escalation gate's minimum-tool-calls threshold.
    """

    DASHBOARD = "dashboard"
    PORTAL = "portal"
    WIDGET = "widget"
    SMS = "sms"
    EMAIL = "email"
    SLACK = "slack"
    API = "api"
