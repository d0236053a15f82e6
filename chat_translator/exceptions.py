# chat_translator/exceptions.py
"""
本模块定义了 Chat-Translator 项目中所有自定义的、语义化的异常类型。

这些异常只在服务商适配器内部流动：`BaseProvider.atranslate` 会把它们
转换为 `ProviderError`，绝不会让单个请求的失败终止整个引擎。
"""

from chat_translator.types import ErrorKind


class ChatTranslatorError(Exception):
    """
    所有 Chat-Translator 自定义异常的通用基类。
    每个子类通过 `error_kind` 声明其在结果错误通道中的分类。
    """

    error_kind: ErrorKind = ErrorKind.INTERNAL


class APIError(ChatTranslatorError):
    """表示与外部翻译服务交互时发生的错误。"""

    pass


class TransportError(APIError):
    """网络故障或服务返回了非成功状态码。"""

    error_kind = ErrorKind.TRANSPORT


class MalformedResponseError(APIError):
    """响应结构中无法提取出译文。"""

    error_kind = ErrorKind.MALFORMED_RESPONSE
