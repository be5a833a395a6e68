"""Translation runner executed by dispatched jobs."""

from glooscap.runner.runner import TranslationRunner

__all__ = ["TranslationRunner"]
