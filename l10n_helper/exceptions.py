# l10n_helper/exceptions.py
"""
本模块定义了 l10n-helper 中所有自定义的、语义化的异常类型。

这些异常只在子系统内部流动：调用方（调度器、控制器）捕获它们、记录日志，
然后降级为“显示更少的注解”，绝不会让宿主进程崩溃。
"""


class L10nHelperError(Exception):
    """
    所有 l10n-helper 自定义异常的通用基类。
    捕获此异常可以处理所有源自本项目的预期错误。
    """
    pass


class ConfigurationError(L10nHelperError):
    """
    表示在加载、解析或验证配置时发生的错误。
    例如，设置文件不是合法的 JSON，或配置值超出允许范围。
    """
    pass


class ConfigParseError(ConfigurationError):
    """
    表示某条自定义提取规则无法构造（正则语法错误、捕获组越界等）。
    只有这一条规则会被丢弃，其余规则照常生效。
    """

    def __init__(self, message: str, *, pattern: str | None = None):
        super().__init__(message)
        self.pattern = pattern


class ResourceLoadError(L10nHelperError):
    """
    表示加载翻译资源文件失败：目录不存在、文件不可读或内容格式错误。
    发生时翻译缓存被置空，错误通过 LoadReport 返回给调用方。
    """

    def __init__(self, message: str, *, path: str | None = None):
        super().__init__(message)
        self.path = path


class ScanError(L10nHelperError):
    """
    表示扫描过程中某条规则或某一行出现运行期错误。
    该规则/行被跳过，扫描继续处理其余部分。
    """

    def __init__(self, message: str, *, rule: str | None = None):
        super().__init__(message)
        self.rule = rule


class WindowOverflowError(ScanError):
    """
    表示局部扫描窗口的上下文不足以容纳某个多行匹配。
    调度器捕获后改为全量扫描。
    """
    pass
