"""duoagent Agent -- 任务处理流水线

文本提取 -> 意图识别（+ 音色切换）-> 人设提示词 -> 流式/非流式生成 -> 状态与 Artifact 上报。
"""

from .errors import (
    CancellationError,
    ClassificationError,
    GenerationError,
    PipelineError,
    ReportingError,
    ValidationError,
)
from .generator import ResponseGenerator
from .handle import TaskHandle, VoiceUpdater
from .intent import (
    INTENT_DETECTION_PROMPT,
    VOICE_UPDATE_MIN_TASK_ID_LENGTH,
    IntentClassifier,
    IntentResult,
)
from .personas import Persona, PersonaRegistry
from .processor import TaskProcessor

__all__ = [
    # 流水线
    "TaskProcessor",
    "ResponseGenerator",
    "IntentClassifier",
    "IntentResult",
    "INTENT_DETECTION_PROMPT",
    "VOICE_UPDATE_MIN_TASK_ID_LENGTH",
    # 人设
    "Persona",
    "PersonaRegistry",
    # 能力接口
    "TaskHandle",
    "VoiceUpdater",
    # 异常
    "PipelineError",
    "ValidationError",
    "ClassificationError",
    "GenerationError",
    "CancellationError",
    "ReportingError",
]
