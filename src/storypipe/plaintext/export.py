# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 剧情 IR 的纯文本表示，主要用于比较和审阅
#
# 文件分为三段：
#   .text  所有文本，每项为 "t<编号>: <内容>;"
#   .path  所有资源路径，每项为 "p<编号>: <内容>;"
#   .code  每行一个动作，"<三字母操作码> <参数>, <参数>, ..."，后面跟着所有的子块 "sub_<编号>:"
# 文本与路径都去重（保留第一次出现的顺序），代码中只用编号引用
# 数字以 # 开头，列表为 [a, b]，站位为 {#<站位编号>, #<偏移>}
# 内容中的 \ 写作 \\，; 写作 \;

from __future__ import annotations

import typing

import bidict

from ..storyir import *
from ..exceptions import SPInternalError

# 操作码与动作类型一一对应，读取时反查
OPCODE_TABLE : bidict.bidict[type[StepAction], str] = bidict.bidict({
  TalkAction : "tlk",
  TelopAction : "tlp",
  ShowModelAction : "mds",
  HideModelAction : "mdh",
  MoveModelAction : "mdm",
  ActAction : "act",
  ExpressAction : "exp",
  HorizontalShakeAction : "hsk",
  VerticalShakeAction : "vsk",
  ShowBlackCoverAction : "bcs",
  HideBlackCoverAction : "bch",
  ShowWhiteCoverAction : "wcs",
  HideWhiteCoverAction : "wch",
  ShakeScreenAction : "ssc",
  ShakeDialogBoxAction : "sdb",
  ChangeBackgroundAction : "cbg",
  ChangeBGMAction : "cbm",
  ChangeSEAction : "cse",
  BlockingAction : "blk",
  DelayAction : "slp",
  ForkTaskAction : "tsk",
  WaitForAllAction : "wfa",
  WaitForTapAction : "wft",
})

OPCODE_WIDTH = 7

def escape_entry(s : str) -> str:
  # 必须先处理反斜杠
  return s.replace('\\', '\\\\').replace(';', '\\;')

def collect_texts_and_paths(actions : typing.Iterable[StepAction]) -> tuple[list[str], list[str]]:
  # 前序遍历收集所有文本和路径，去重并保持第一次出现的顺序
  texts : dict[str, None] = {}
  paths : dict[str, None] = {}
  for action in walk_actions(actions):
    match action:
      case TalkAction():
        texts[action.text] = None
        for name in action.character_names:
          texts[name] = None
        if action.voice_path is not None:
          paths[action.voice_path] = None
      case TelopAction():
        texts[action.text] = None
      case ShowModelAction():
        paths[action.model_path] = None
      case ActAction():
        texts[action.motion_name] = None
      case ExpressAction():
        texts[action.expression_name] = None
      case AssetChangeActionBase():
        paths[action.path] = None
      case _:
        pass
  return (list(texts.keys()), list(paths.keys()))

def format_number(value : int | float) -> str:
  return '#' + str(value)

def format_position(position : Position) -> str:
  return '{' + format_number(position.base.value) + ', ' + format_number(position.offset_x) + '}'

class PlainTextExportVisitor(StepActionVisitorBase):
  text_index : dict[str, int]
  path_index : dict[str, int]
  sub_blocks : list[str]

  def __init__(self, texts : list[str], paths : list[str]) -> None:
    self.text_index = {t : i for i, t in enumerate(texts)}
    self.path_index = {p : i for i, p in enumerate(paths)}
    self.sub_blocks = []

  def ref_text(self, text : str) -> str:
    if (index := self.text_index.get(text)) is None:
      raise SPInternalError("Text not in table: " + text)
    return 't' + str(index)

  def ref_path(self, path : str) -> str:
    if (index := self.path_index.get(path)) is None:
      raise SPInternalError("Path not in table: " + path)
    return 'p' + str(index)

  @staticmethod
  def format_line(action : StepAction, args : list[str]) -> str:
    opcode = OPCODE_TABLE[type(action)]
    if len(args) == 0:
      return opcode + '\n'
    return opcode.ljust(OPCODE_WIDTH) + ', '.join(args) + '\n'

  def convert_actions(self, actions : typing.Iterable[StepAction]) -> str:
    return ''.join(action.accept(self) for action in actions)

  def visitTalkAction(self, action : TalkAction) -> str:
    args = [
      self.ref_text(action.text),
      '[' + ', '.join(format_number(i) for i in action.character_ids) + ']',
      '[' + ', '.join(self.ref_text(n) for n in action.character_names) + ']',
    ]
    if action.voice_path is not None:
      args.append(self.ref_path(action.voice_path))
    return self.format_line(action, args)

  def visitTelopAction(self, action : TelopAction) -> str:
    return self.format_line(action, [self.ref_text(action.text)])

  def visitShowModelAction(self, action : ShowModelAction) -> str:
    return self.format_line(action, [format_number(action.character_id), self.ref_path(action.model_path), format_position(action.position)])

  def visitMoveModelAction(self, action : MoveModelAction) -> str:
    return self.format_line(action, [format_number(action.character_id), format_position(action.position)])

  def visitActAction(self, action : ActAction) -> str:
    return self.format_line(action, [format_number(action.character_id), self.ref_text(action.motion_name)])

  def visitExpressAction(self, action : ExpressAction) -> str:
    return self.format_line(action, [format_number(action.character_id), self.ref_text(action.expression_name)])

  def visitDelayAction(self, action : DelayAction) -> str:
    return self.format_line(action, [format_number(action.seconds)])

  def visitWaitForAllAction(self, action : WaitForAllAction) -> str:
    return self.format_line(action, [])

  def visitWaitForTapAction(self, action : WaitForTapAction) -> str:
    return self.format_line(action, [])

  def visit_unhandled(self, action : StepAction) -> str:
    # 剩下的动作按基类处理
    match action:
      case HideModelAction() | HorizontalShakeAction() | VerticalShakeAction():
        return self.format_line(action, [format_number(action.character_id)])
      case DurationActionBase():
        return self.format_line(action, [format_number(action.duration)])
      case AssetChangeActionBase():
        return self.format_line(action, [self.ref_path(action.path)])
      case ActionGroupBase():
        # 子块先转换，其中的子块编号更小
        body = self.convert_actions(action.actions)
        self.sub_blocks.append(body)
        return self.format_line(action, ['$sub_' + str(len(self.sub_blocks) - 1)])
    return super().visit_unhandled(action)

def convert_to_plaintext(story : Story) -> str:
  texts, paths = collect_texts_and_paths(story.actions)
  result = ".text\n"
  for index, text in enumerate(texts):
    result += 't' + str(index) + ': ' + escape_entry(text) + ';\n'
  result += "\n"
  result += ".path\n"
  for index, path in enumerate(paths):
    result += 'p' + str(index) + ': ' + escape_entry(path) + ';\n'
  result += "\n"
  visitor = PlainTextExportVisitor(texts, paths)
  result += ".code\n"
  result += visitor.convert_actions(story.actions)
  result += "\n"
  result += "\n".join('sub_' + str(i) + ':\n' + code for i, code in enumerate(visitor.sub_blocks))
  return result
