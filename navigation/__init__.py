"""Navigation alert classification and depth fusion."""

from navigation.alerts import (
    NavigationAlert,
    NavigationAlertClassifier,
    Severity,
    SeverityThresholds,
    classify_severity,
    spoken_guidance,
)
from navigation.depth import DepthFrame, DepthPoint, DepthZone
from navigation.depth_overlay import DepthFusionOverlay

__all__ = [
    "DepthFrame",
    "DepthFusionOverlay",
    "DepthPoint",
    "DepthZone",
    "NavigationAlert",
    "NavigationAlertClassifier",
    "Severity",
    "SeverityThresholds",
    "classify_severity",
    "spoken_guidance",
]
