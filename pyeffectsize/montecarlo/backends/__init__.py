"""Bootstrap backends."""

from pyeffectsize.montecarlo.backends.cpu import CPUSubjectBootstrapBackend

__all__ = ["CPUSubjectBootstrapBackend"]
