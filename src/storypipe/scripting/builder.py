# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 带内嵌函数的剧情程序
# 程序在构建时先登记所有内嵌函数和动作，build() 时统一编译
# 所有函数都会被编译（即使前面已经出错），这样可以一次报告所有问题；只要有错误就不生成剧情

from __future__ import annotations

import dataclasses

from ..storyir import Story, StepAction, Locale
from .diagnostic import Diagnostic, SourceLocation, has_error
from .evaluator import FunctionEvaluator
from .mangling import FunctionDeclaration, mangle_function

@dataclasses.dataclass
class EmbeddedFunction:
  mangled_name : str
  source : str
  location : SourceLocation | None

class StoryProgram:
  locale : Locale
  functions : list[EmbeddedFunction]
  actions : list[StepAction]

  def __init__(self, locale : Locale | str) -> None:
    self.locale = Locale.get(locale)
    self.functions = []
    self.actions = []

  def add_function(self, decl : FunctionDeclaration, source : str, location : SourceLocation | None, parent : str | None = None, is_static : bool = False) -> str:
    mangled_name = mangle_function(decl, parent, is_static)
    self.functions.append(EmbeddedFunction(mangled_name, source, location))
    return mangled_name

  def emit(self, action : StepAction):
    self.actions.append(action)

  def build(self, evaluator : FunctionEvaluator) -> tuple[Story | None, list[Diagnostic]]:
    diags : list[Diagnostic] = []
    for f in self.functions:
      diags.extend(evaluator.compile(f.mangled_name, f.source, f.location))
    if has_error(diags):
      return (None, diags)
    return (Story(self.locale, self.actions), diags)
