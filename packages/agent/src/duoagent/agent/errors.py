"""流水线异常体系

ValidationError / ClassificationError / GenerationError / CancellationError
为终止性错误：任务进入非 completed 的终态，process() 向上抛出。
ReportingError 为非致命错误：状态更新或 Artifact 追加失败，只记录日志。
"""


class PipelineError(Exception):
    """流水线基础异常"""


class ValidationError(PipelineError):
    """入站消息中没有可提取的文本"""


class ClassificationError(PipelineError):
    """意图识别请求本身失败（网络或服务错误）"""


class GenerationError(PipelineError):
    """回复生成失败（补全请求、流式读取、或响应中没有 choice）"""


class CancellationError(PipelineError):
    """任务在流式生成过程中被取消"""


class ReportingError(PipelineError):
    """TaskHandle 上报状态或追加 Artifact 失败（不中断任务）"""
