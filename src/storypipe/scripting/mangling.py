# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 内嵌函数的名称修饰 (name mangling)
# 修饰后的名称作为 FunctionEvaluator 中的键，同一声明总是得到同一名称
#
# 格式：
#   $z [p <名称>] f <名称> (<参数名> <参数类型>)* [e [A] [s]] r (<名称> | V)
# 其中 <名称> 为 "<长度><原文>"，比如 "5hello"
# e 后面 A 表示 async，s 表示 static；r 后面 V 表示没有返回值

from __future__ import annotations

import dataclasses

MANGLING_PREFIX = "$z"

@dataclasses.dataclass(frozen=True)
class Parameter:
  name : str
  type_name : str = ''

@dataclasses.dataclass(frozen=True)
class FunctionDeclaration:
  name : str
  parameters : tuple[Parameter, ...] = ()
  return_type : str = '' # 空字符串表示没有返回值
  is_async : bool = False

  def __post_init__(self):
    object.__setattr__(self, "parameters", tuple(self.parameters))

def _name_spec(name : str) -> str:
  return str(len(name)) + name

def mangle_function(decl : FunctionDeclaration, parent : str | None = None, is_static : bool = False) -> str:
  result = MANGLING_PREFIX
  if parent is not None:
    result += 'p' + _name_spec(parent)
  result += 'f' + _name_spec(decl.name)
  for param in decl.parameters:
    result += _name_spec(param.name) + _name_spec(param.type_name)
  if decl.is_async or is_static:
    result += 'e'
    if decl.is_async:
      result += 'A'
    if is_static:
      result += 's'
  result += 'r'
  if len(decl.return_type) > 0:
    result += _name_spec(decl.return_type)
  else:
    result += 'V'
  return result

class _Reader:
  text : str
  pos : int

  def __init__(self, text : str) -> None:
    self.text = text
    self.pos = 0

  def at_end(self) -> bool:
    return self.pos >= len(self.text)

  def peek(self) -> str:
    return self.text[self.pos] if self.pos < len(self.text) else ''

  def take(self) -> str:
    c = self.peek()
    self.pos += len(c)
    return c

  def take_name(self) -> str | None:
    # 读取 "<长度><原文>"，格式不对时不移动位置
    # 长度没有前导零，"0" 只能单独出现（空名称）
    end = self.pos
    if self.peek() == '0':
      end += 1
    else:
      while end < len(self.text) and self.text[end].isdigit():
        end += 1
    if end == self.pos:
      return None
    count = int(self.text[self.pos:end])
    if end + count > len(self.text):
      return None
    self.pos = end + count
    return self.text[end:end + count]

def demangle_function(mangled : str) -> tuple[FunctionDeclaration, str | None, bool] | None:
  # 返回 (声明, 父级名称, 是否 static)，格式不对时返回 None
  if not mangled.startswith(MANGLING_PREFIX):
    return None
  reader = _Reader(mangled[len(MANGLING_PREFIX):])
  parent = None
  spec = reader.take()
  if spec == 'p':
    parent = reader.take_name()
    if parent is None:
      return None
    spec = reader.take()
  if spec != 'f':
    return None
  name = reader.take_name()
  if name is None:
    return None
  names : list[str] = []
  while (n := reader.take_name()) is not None:
    names.append(n)
  if len(names) % 2 != 0:
    return None
  parameters = [Parameter(names[i], names[i + 1]) for i in range(0, len(names), 2)]
  is_async = False
  is_static = False
  spec = reader.take()
  if spec == 'e':
    if reader.peek() == 'A':
      is_async = True
      reader.take()
    if reader.peek() == 's':
      is_static = True
      reader.take()
    if not (is_async or is_static):
      return None
    spec = reader.take()
  if spec != 'r':
    return None
  return_type = ''
  if reader.peek() == 'V':
    reader.take()
  else:
    rt = reader.take_name()
    if rt is None:
      return None
    return_type = rt
  if not reader.at_end():
    return None
  return (FunctionDeclaration(name, tuple(parameters), return_type, is_async), parent, is_static)
