"""Voice 异常"""


class VoiceUpdateError(Exception):
    """语音配置更新失败（SDK 错误或网络错误）"""

    def __init__(self, message: str, task_id: str = "") -> None:
        super().__init__(message)
        self.task_id = task_id
