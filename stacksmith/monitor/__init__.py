"""Terminal rendering for deployment plans and run outcomes."""

from stacksmith.monitor.renderer import DeploymentRenderer

__all__ = ["DeploymentRenderer"]
