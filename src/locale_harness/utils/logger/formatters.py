"""日志格式化器模块"""

import logging
import re

# ANSI 转义序列，及剩余的换行/控制字符
_ANSI = re.compile(r'\x1b(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])')
_BREAKS = re.compile(r'[\r\n\x1b\x9b]+')


def single_line(text: str) -> str:
    """去掉颜色码并把多行文本（如 ARIA 快照）压成一行"""
    return _BREAKS.sub(' ', _ANSI.sub('', text))


class SecurityFormatter(logging.Formatter):
    """时间 级别 [文件:函数:行号] 消息，消息始终单行

    只清理消息本身，不修改 record，同一条记录交给多个 handler 时互不影响。
    异常堆栈保持原样。
    """
    STANDARD_FORMAT = "%(asctime)s %(levelname)-8s [%(filename)s:%(funcName)s:%(lineno)d] %(message)s"
    DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

    def formatMessage(self, record: logging.LogRecord) -> str:
        original = record.message
        record.message = single_line(original)
        try:
            return super().formatMessage(record)
        finally:
            record.message = original
