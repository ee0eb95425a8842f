from .base_runner import BaseRunner, Phase, Resolution, Trial
from .sequencer import TrialSequencer
from .span import AdaptiveSpanController

__all__ = ["AdaptiveSpanController", "BaseRunner", "Phase", "Resolution", "Trial", "TrialSequencer"]
