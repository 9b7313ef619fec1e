# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 内嵌 TypeScript 函数的求值器
# 每个 FunctionEvaluator 实例维护 修饰后的函数名 -> 转译后的 JavaScript 代码 的映射
# 同一个名称只编译一次，之后再提交同名的代码时直接忽略（以第一次为准）
# 实例之间不共享任何状态；实例本身不是线程安全的，需要并发的话每个线程用一个实例
#
# 转译器放在 TranspilerBase 后面，默认使用 Node.js 运行随包附带的 tscompile.js

from __future__ import annotations

import dataclasses
import json
import os
import shutil
import subprocess
import typing

from ..exceptions import SPNotImplementedError
from ..language import TranslationDomain
from .diagnostic import *

TR_scripting = TranslationDomain("scripting")

_tr_transpiler_unavailable = TR_scripting.tr("transpiler_unavailable",
  en="The TypeScript transpiler cannot run: {reason}",
  zh_cn="无法运行 TypeScript 转译器：{reason}",
  zh_hk="無法運行 TypeScript 轉譯器：{reason}",
)
_tr_node_not_found = TR_scripting.tr("node_not_found",
  en="Node.js executable not found. Please install Node.js or set STORYPIPE_NODE.",
  zh_cn="找不到 Node.js 可执行文件。请安装 Node.js 或者设置 STORYPIPE_NODE 环境变量。",
  zh_hk="找不到 Node.js 可執行文件。請安裝 Node.js 或者設置 STORYPIPE_NODE 環境變量。",
)

@dataclasses.dataclass
class TranspileDiagnostic:
  line : int
  column : int
  message : str
  category : int = 1 # 与 TypeScript 的 DiagnosticCategory 一致：0 警告，1 错误，2 建议，3 消息

@dataclasses.dataclass
class TranspileResult:
  diagnostics : list[TranspileDiagnostic]
  js_code : str

class TranspilerUnavailableError(RuntimeError):
  pass

class TranspilerBase:
  def transpile(self, source : str, library : str) -> TranspileResult:
    # 转译失败（代码有错）时不应抛异常，而是在结果中给出诊断信息
    # 只有转译器本身无法运行时才抛出 TranspilerUnavailableError
    raise SPNotImplementedError

def get_bundled_script_path() -> str:
  return os.path.join(os.path.dirname(os.path.abspath(__file__)), "tscompile.js")

class NodeTypeScriptTranspiler(TranspilerBase):
  node_executable : str | None
  timeout : float

  def __init__(self, node_executable : str | None = None, timeout : float = 60) -> None:
    self.node_executable = node_executable
    self.timeout = timeout

  def get_node_executable(self) -> str | None:
    if self.node_executable:
      return self.node_executable
    if node := os.environ.get("STORYPIPE_NODE"):
      return node
    return shutil.which("node")

  def transpile(self, source : str, library : str) -> TranspileResult:
    node = self.get_node_executable()
    if node is None:
      raise TranspilerUnavailableError(_tr_node_not_found.get())
    request = json.dumps({"source": source, "library": library}, ensure_ascii=False)
    try:
      result = subprocess.run([node, get_bundled_script_path()], input=request.encode("utf-8"), timeout=self.timeout, capture_output=True, check=False)
    except (OSError, subprocess.TimeoutExpired) as e:
      raise TranspilerUnavailableError(str(e)) from e
    if result.returncode != 0:
      raise TranspilerUnavailableError(result.stderr.decode("utf-8", errors="replace").strip())
    try:
      response = json.loads(result.stdout.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
      raise TranspilerUnavailableError(str(e)) from e
    diagnostics = []
    for d in response.get("diagnostics", []):
      diagnostics.append(TranspileDiagnostic(int(d.get("line", 0)), int(d.get("column", 0)), str(d.get("message", "")), int(d.get("category", 1))))
    return TranspileResult(diagnostics, str(response.get("jsCode", "")))

def get_severity_from_category(category : int) -> DiagnosticSeverity:
  match category:
    case 0:
      return DiagnosticSeverity.WARNING
    case 2:
      return DiagnosticSeverity.REMARK
    case 3:
      return DiagnosticSeverity.NOTE
    case _:
      return DiagnosticSeverity.ERROR

class FunctionEvaluator:
  library_source : str
  transpiler : TranspilerBase
  _source_map : dict[str, str] # 修饰后的函数名 -> JavaScript 代码

  def __init__(self, library_source : str, transpiler : TranspilerBase | None = None) -> None:
    self.library_source = library_source
    self.transpiler = transpiler if transpiler is not None else NodeTypeScriptTranspiler()
    self._source_map = {}

  def compile(self, mangled_name : str, source_code : str, location : SourceLocation | None = None) -> list[Diagnostic]:
    if mangled_name in self._source_map:
      return []
    try:
      result = self.transpiler.transpile(source_code, self.library_source)
    except TranspilerUnavailableError as e:
      message = DiagnosticMessage(DiagnosticKind.TRANSPILER_UNAVAILABLE, _tr_transpiler_unavailable.format(reason=str(e)))
      return [Diagnostic(location, 0, 0, message, DiagnosticSeverity.ERROR)]
    diags = []
    for d in result.diagnostics:
      message = DiagnosticMessage(DiagnosticKind.TYPESCRIPT_ERROR, d.message)
      diags.append(Diagnostic(location, d.line, d.column, message, get_severity_from_category(d.category)))
    self._source_map[mangled_name] = result.js_code
    return diags

  def get_compiled(self, mangled_name : str) -> str | None:
    return self._source_map.get(mangled_name)

  def compiled_names(self) -> list[str]:
    return list(self._source_map.keys())

  def __contains__(self, mangled_name : object) -> bool:
    return mangled_name in self._source_map
