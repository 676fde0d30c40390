"""duoagent Voice -- TRTC 语音后端"""

from .client import TRTCVoiceClient
from .config import VoiceConfig, load_voice_config
from .exceptions import VoiceUpdateError

__all__ = [
    "TRTCVoiceClient",
    "VoiceConfig",
    "load_voice_config",
    "VoiceUpdateError",
]
