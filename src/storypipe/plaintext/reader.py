# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 读取纯文本表示，重建剧情 IR
# 格式见 export.py；文本和路径中可以有换行，所以这两段按字符读取，.code 段按行读取

from __future__ import annotations

import re

from ..storyir import *
from .export import OPCODE_TABLE

class PlainTextSyntaxError(ValueError):
  line : int

  def __init__(self, msg : str, line : int) -> None:
    super().__init__("line " + str(line) + ": " + msg)
    self.line = line

_SUB_LABEL_RE = re.compile(r'^sub_(\d+):$')
_ENTRY_NAME_RE = re.compile(r'([tp])(\d+): ')

class _PlainTextReader:
  text : str
  pos : int
  texts : list[str]
  paths : list[str]
  # 子块编号 -> (起始行号, [(行号, 代码行)])
  code_blocks : dict[int | None, tuple[int, list[tuple[int, str]]]]
  _resolved_subs : dict[int, tuple[StepAction, ...]]
  _resolving : set[int]

  def __init__(self, text : str) -> None:
    self.text = text
    self.pos = 0
    self.texts = []
    self.paths = []
    self.code_blocks = {}
    self._resolved_subs = {}
    self._resolving = set()

  def get_line(self, pos : int | None = None) -> int:
    if pos is None:
      pos = self.pos
    return self.text.count('\n', 0, pos) + 1

  def error(self, msg : str, line : int | None = None) -> PlainTextSyntaxError:
    return PlainTextSyntaxError(msg, line if line is not None else self.get_line())

  def expect_line(self, expected : str):
    end = self.text.find('\n', self.pos)
    if end < 0:
      end = len(self.text)
    if self.text[self.pos:end] != expected:
      raise self.error("expecting '" + expected + "'")
    self.pos = min(end + 1, len(self.text))

  def skip_empty_lines(self):
    while self.pos < len(self.text) and self.text[self.pos] == '\n':
      self.pos += 1

  def read_table(self, prefix : str, result : list[str]):
    # 读到空行（或者下一段的开头）为止
    while self.pos < len(self.text) and self.text[self.pos] != '\n':
      m = _ENTRY_NAME_RE.match(self.text, self.pos)
      if m is None or m.group(1) != prefix:
        raise self.error("malformed " + prefix + " entry")
      if int(m.group(2)) != len(result):
        raise self.error("entry index out of order: " + prefix + m.group(2))
      self.pos = m.end()
      value = ''
      while True:
        if self.pos >= len(self.text):
          raise self.error("unterminated entry")
        c = self.text[self.pos]
        if c == '\\':
          if self.pos + 1 >= len(self.text):
            raise self.error("unterminated escape")
          value += self.text[self.pos + 1]
          self.pos += 2
          continue
        self.pos += 1
        if c == ';':
          break
        value += c
      result.append(value)
      if self.pos < len(self.text) and self.text[self.pos] != '\n':
        raise self.error("expecting newline after entry")
      self.pos += 1

  def read_code(self):
    current : int | None = None
    lines : list[tuple[int, str]] = []
    self.code_blocks[None] = (self.get_line(), lines)
    line_number = self.get_line()
    for line in self.text[self.pos:].split('\n'):
      if len(line) > 0:
        if m := _SUB_LABEL_RE.match(line):
          current = int(m.group(1))
          if current in self.code_blocks:
            raise self.error("duplicated sub-block label: " + line, line_number)
          lines = []
          self.code_blocks[current] = (line_number, lines)
        else:
          lines.append((line_number, line))
      line_number += 1

  def read(self, locale : Locale | str) -> Story:
    self.expect_line(".text")
    self.read_table('t', self.texts)
    self.skip_empty_lines()
    self.expect_line(".path")
    self.read_table('p', self.paths)
    self.skip_empty_lines()
    self.expect_line(".code")
    self.read_code()
    return Story(locale, self.resolve_block(None))

  def resolve_block(self, index : int | None) -> tuple[StepAction, ...]:
    _, lines = self.code_blocks[index]
    return tuple(self.parse_instruction(line_number, line) for line_number, line in lines)

  def resolve_sub(self, index : int, line : int) -> tuple[StepAction, ...]:
    if index in self._resolved_subs:
      return self._resolved_subs[index]
    if index not in self.code_blocks:
      raise self.error("undefined sub-block: sub_" + str(index), line)
    if index in self._resolving:
      raise self.error("recursive sub-block: sub_" + str(index), line)
    self._resolving.add(index)
    result = self.resolve_block(index)
    self._resolving.remove(index)
    self._resolved_subs[index] = result
    return result

  # 参数解析

  @staticmethod
  def split_args(s : str) -> list[str]:
    # 按最外层的逗号分开
    result = []
    depth = 0
    start = 0
    for i, c in enumerate(s):
      if c in '[{':
        depth += 1
      elif c in ']}':
        depth -= 1
      elif c == ',' and depth == 0:
        result.append(s[start:i].strip())
        start = i + 1
    last = s[start:].strip()
    if len(last) > 0 or len(result) > 0:
      result.append(last)
    return result

  def parse_number(self, arg : str, line : int) -> int | float:
    if not arg.startswith('#'):
      raise self.error("expecting number, got '" + arg + "'", line)
    try:
      return int(arg[1:])
    except ValueError:
      pass
    try:
      return float(arg[1:])
    except ValueError as e:
      raise self.error("invalid number '" + arg + "'", line) from e

  def parse_ref(self, arg : str, prefix : str, table : list[str], line : int) -> str:
    if not (arg.startswith(prefix) and arg[1:].isdigit()):
      raise self.error("expecting " + prefix + "<index>, got '" + arg + "'", line)
    index = int(arg[1:])
    if index >= len(table):
      raise self.error("reference out of range: " + arg, line)
    return table[index]

  def parse_list(self, arg : str, line : int) -> list[str]:
    if not (arg.startswith('[') and arg.endswith(']')):
      raise self.error("expecting list, got '" + arg + "'", line)
    return self.split_args(arg[1:-1])

  def parse_position(self, arg : str, line : int) -> Position:
    if not (arg.startswith('{') and arg.endswith('}')):
      raise self.error("expecting position, got '" + arg + "'", line)
    parts = self.split_args(arg[1:-1])
    if len(parts) != 2:
      raise self.error("malformed position '" + arg + "'", line)
    base = self.parse_number(parts[0], line)
    try:
      position_base = PositionBase(int(base))
    except ValueError as e:
      raise self.error("invalid position base '" + parts[0] + "'", line) from e
    return Position(position_base, float(self.parse_number(parts[1], line)))

  def parse_sub_label(self, arg : str, line : int) -> tuple[StepAction, ...]:
    if not (arg.startswith('$sub_') and arg[5:].isdigit()):
      raise self.error("expecting sub-block label, got '" + arg + "'", line)
    return self.resolve_sub(int(arg[5:]), line)

  def parse_instruction(self, line : int, code : str) -> StepAction:
    parts = code.split(None, 1)
    opcode = parts[0]
    args = self.split_args(parts[1]) if len(parts) > 1 else []
    action_type = OPCODE_TABLE.inverse.get(opcode)
    if action_type is None:
      raise self.error("unknown opcode '" + opcode + "'", line)

    def expect_count(*counts : int):
      if len(args) not in counts:
        raise self.error("wrong number of arguments for " + opcode, line)

    def text(arg : str) -> str:
      return self.parse_ref(arg, 't', self.texts, line)
    def path(arg : str) -> str:
      return self.parse_ref(arg, 'p', self.paths, line)
    def number(arg : str) -> int | float:
      return self.parse_number(arg, line)

    if action_type is TalkAction:
      expect_count(3, 4)
      ids = [int(number(a)) for a in self.parse_list(args[1], line)]
      names = [text(a) for a in self.parse_list(args[2], line)]
      voice = path(args[3]) if len(args) == 4 else None
      return TalkAction(text(args[0]), ids, names, voice)
    if action_type is TelopAction:
      expect_count(1)
      return TelopAction(text(args[0]))
    if action_type is ShowModelAction:
      expect_count(3)
      return ShowModelAction(int(number(args[0])), path(args[1]), self.parse_position(args[2], line))
    if action_type is MoveModelAction:
      expect_count(2)
      return MoveModelAction(int(number(args[0])), self.parse_position(args[1], line))
    if action_type is ActAction:
      expect_count(2)
      return ActAction(int(number(args[0])), text(args[1]))
    if action_type is ExpressAction:
      expect_count(2)
      return ExpressAction(int(number(args[0])), text(args[1]))
    if action_type is DelayAction:
      expect_count(1)
      return DelayAction(float(number(args[0])))
    if issubclass(action_type, CharacterActionBase):
      expect_count(1)
      return action_type(int(number(args[0])))
    if issubclass(action_type, DurationActionBase):
      expect_count(1)
      return action_type(float(number(args[0])))
    if issubclass(action_type, AssetChangeActionBase):
      expect_count(1)
      return action_type(path(args[0]))
    if issubclass(action_type, ActionGroupBase):
      expect_count(1)
      return action_type(self.parse_sub_label(args[0], line))
    expect_count(0)
    return action_type()

def read_plaintext(text : str, locale : Locale | str) -> Story:
  return _PlainTextReader(text).read(locale)
