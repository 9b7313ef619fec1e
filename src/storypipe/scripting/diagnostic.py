# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 内嵌脚本的诊断信息
# 编译失败不抛异常，而是以 Diagnostic 的形式返回给调用者，由调用者决定是否中止

from __future__ import annotations

import dataclasses
import enum
import typing

from ..util.message import MessageHandler

class DiagnosticSeverity(enum.Enum):
  ERROR = "error"
  WARNING = "warning"
  NOTE = "note"
  REMARK = "remark"

class DiagnosticKind(enum.Enum):
  TYPESCRIPT_ERROR = "typescript_error" # 转译器报告的问题
  TRANSPILER_UNAVAILABLE = "transpiler_unavailable" # 转译器本身无法运行

@dataclasses.dataclass(frozen=True)
class SourceLocation:
  # 字符串字面量在源文件中的位置，由调用者提供
  file : str
  line : int = 0
  column : int = 0

  def __str__(self) -> str:
    return self.file + ':' + str(self.line) + ':' + str(self.column)

@dataclasses.dataclass(frozen=True)
class DiagnosticMessage:
  kind : DiagnosticKind
  detail : str

@dataclasses.dataclass(frozen=True)
class Diagnostic:
  location : SourceLocation | None
  line : int # 在字面量文本内的行号，从 1 开始；0 表示转译器没有给出位置
  column : int
  message : DiagnosticMessage
  severity : DiagnosticSeverity = DiagnosticSeverity.ERROR

  def is_error(self) -> bool:
    return self.severity == DiagnosticSeverity.ERROR

  def __str__(self) -> str:
    result = ''
    if self.location is not None:
      result = str(self.location) + ': '
    if self.line > 0:
      result += '(' + str(self.line) + ':' + str(self.column) + ') '
    return result + self.severity.value + ': ' + self.message.detail

def has_error(diagnostics : typing.Iterable[Diagnostic]) -> bool:
  return any(d.is_error() for d in diagnostics)

def report_diagnostics(diagnostics : typing.Iterable[Diagnostic]):
  # 把诊断信息输出到 MessageHandler
  for d in diagnostics:
    location = str(d.location) if d.location is not None else ''
    text = d.message.detail
    if d.line > 0:
      text = str(d.line) + ':' + str(d.column) + ': ' + text
    match d.severity:
      case DiagnosticSeverity.ERROR:
        MessageHandler.error(text, location=location)
      case DiagnosticSeverity.WARNING:
        MessageHandler.warning(text, location=location)
      case _:
        MessageHandler.info(text, location=location)
