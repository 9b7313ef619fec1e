# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 导出为 Bestdori 社区剧情的 JSON 格式
# 顶层为 {"server", "voice", "background", "bgm", "actions"}
# 剧情开头连续的换背景/换 BGM 动作作为初始状态放在顶层，不再出现在 actions 中
# BlockingAction / ForkTaskAction 的内容直接展开到 actions 中：
#   BlockingAction 的最后一个动作 wait=true，ForkTaskAction 的内容不等待
# 对话 (talk) 总是 wait=true

from __future__ import annotations

import json
import typing

from ..storyir import *
from ..enginecommon.state import SequenceState

# IR 站位 -> Bestdori 站位；Bestdori 只有五个站位
_POSITION_MAP : dict[PositionBase, str] = {
  PositionBase.LEFT_OUTSIDE : "leftOver",
  PositionBase.LEFT : "leftInside",
  PositionBase.LEFT_INSIDE : "leftInside",
  PositionBase.LEFT_BOTTOM : "leftInside",
  PositionBase.LEFT_INSIDE_BOTTOM : "leftInside",
  PositionBase.CENTER : "center",
  PositionBase.CENTER_BOTTOM : "center",
  PositionBase.RIGHT_OUTSIDE : "rightOver",
  PositionBase.RIGHT : "rightInside",
  PositionBase.RIGHT_INSIDE : "rightInside",
  PositionBase.RIGHT_BOTTOM : "rightInside",
  PositionBase.RIGHT_INSIDE_BOTTOM : "rightInside",
}

_EFFECT_TYPE_MAP : dict[type[StepAction], str] = {
  ShowBlackCoverAction : "blackOut",
  HideBlackCoverAction : "blackIn",
  ShowWhiteCoverAction : "whiteOut",
  HideWhiteCoverAction : "whiteIn",
  ShakeScreenAction : "shakeScreen",
  ShakeDialogBoxAction : "shakeWindow",
}

BUNDLE_SUFFIX = "_rip"

def map_position(base : PositionBase) -> str:
  return _POSITION_MAP[base]

def resolve_path(path : str, contains_bundle : bool, bundle_prefix : str = '') -> dict[str, str]:
  if path.startswith("http://") or path.startswith("https://"):
    return {"type": "custom", "url": path}
  result = {"type": "bandori"}
  parts = path.split('/')
  filename = parts[-1]
  # 去掉最后一个扩展名；没有扩展名时保留原名
  if '.' in filename:
    filename = filename.rsplit('.', 1)[0]
  result["file"] = filename
  if contains_bundle and len(parts) > 1:
    result["bundle"] = bundle_prefix + parts[-2].removesuffix(BUNDLE_SUFFIX)
  return result

def get_costume(model_path : str | None) -> str:
  if model_path is None:
    return ''
  return model_path.split('/')[-1]

class BestdoriExportVisitor(StepActionVisitorBase):
  # 每次访问动作前设置 state 与 wait，访问结果是该动作对应的记录列表
  state : SequenceState
  wait : bool

  def __init__(self) -> None:
    self.state = SequenceState()
    self.wait = False

  def create_record(self, type_name : str, effect_type : str | None = None) -> dict[str, typing.Any]:
    r : dict[str, typing.Any] = {"type": type_name}
    if effect_type is not None:
      r["effectType"] = effect_type
    r["delay"] = int(self.state.delay)
    r["wait"] = self.wait
    return r

  def create_layout_record(self, layout_type : str, character_id : int, side_from : Position, side_to : Position) -> dict[str, typing.Any]:
    r = self.create_record("layout")
    r["layoutType"] = layout_type
    r["character"] = character_id
    r["costume"] = get_costume(self.state.get_model_path(character_id))
    r["motion"] = ""
    r["expression"] = ""
    r["sideFrom"] = map_position(side_from.base)
    r["sideFromOffsetX"] = int(side_from.offset_x)
    r["sideTo"] = map_position(side_to.base)
    r["sideToOffsetX"] = int(side_to.offset_x)
    return r

  def convert_sequence(self, actions : typing.Sequence[StepAction], wait_last : bool) -> list[dict[str, typing.Any]]:
    # 每个序列的状态独立
    saved_state = self.state
    saved_wait = self.wait
    self.state = SequenceState()
    result = []
    for index, action in enumerate(actions):
      self.wait = wait_last and index == len(actions) - 1
      result.extend(action.accept(self))
      self.state.update(action)
    self.state = saved_state
    self.wait = saved_wait
    return result

  def visitTalkAction(self, action : TalkAction):
    r = self.create_record("talk")
    r["wait"] = True
    r["characters"] = list(action.character_ids)
    r["name"] = action.character_names[0] if len(action.character_names) > 0 else ""
    r["body"] = action.text
    r["motions"] = []
    r["voices"] = []
    r["close"] = False
    return [r]

  def visitTelopAction(self, action : TelopAction):
    r = self.create_record("effect", "telop")
    r["text"] = action.text
    return [r]

  def visitShowModelAction(self, action : ShowModelAction):
    r = self.create_layout_record("appear", action.character_id, action.position, action.position)
    r["costume"] = get_costume(action.model_path)
    return [r]

  def visitHideModelAction(self, action : HideModelAction):
    pos = self.state.get_position(action.character_id)
    return [self.create_layout_record("hide", action.character_id, pos, pos)]

  def visitMoveModelAction(self, action : MoveModelAction):
    return [self.create_layout_record("move", action.character_id, self.state.get_position(action.character_id), action.position)]

  def visitHorizontalShakeAction(self, action : HorizontalShakeAction):
    pos = self.state.get_position(action.character_id)
    return [self.create_layout_record("shakeX", action.character_id, pos, pos)]

  def visitVerticalShakeAction(self, action : VerticalShakeAction):
    pos = self.state.get_position(action.character_id)
    return [self.create_layout_record("shakeY", action.character_id, pos, pos)]

  def create_motion_record(self, character_id : int, motion : str, expression : str):
    r = self.create_record("motion")
    r["character"] = character_id
    r["costume"] = get_costume(self.state.get_model_path(character_id))
    r["motion"] = motion
    r["expression"] = expression
    return [r]

  def visitActAction(self, action : ActAction):
    return self.create_motion_record(action.character_id, action.motion_name, "")

  def visitExpressAction(self, action : ExpressAction):
    return self.create_motion_record(action.character_id, "", action.expression_name)

  def visitChangeBackgroundAction(self, action : ChangeBackgroundAction):
    r = self.create_record("effect", "changeBackground")
    r["background"] = resolve_path(action.path, True, "bg/")
    return [r]

  def visitChangeBGMAction(self, action : ChangeBGMAction):
    r = self.create_record("sound")
    r["bgm"] = resolve_path(action.path, False)
    return [r]

  def visitChangeSEAction(self, action : ChangeSEAction):
    r = self.create_record("sound")
    r["se"] = resolve_path(action.path, True)
    return [r]

  def visitBlockingAction(self, action : BlockingAction):
    return self.convert_sequence(action.actions, True)

  def visitForkTaskAction(self, action : ForkTaskAction):
    return self.convert_sequence(action.actions, False)

  def visit_unhandled(self, action : StepAction):
    match action:
      case DurationActionBase():
        r = self.create_record("effect", _EFFECT_TYPE_MAP[type(action)])
        r["duration"] = action.duration
        return [r]
      case DelayAction() | WaitForTapAction() | WaitForAllAction():
        # 只影响状态，不生成记录
        return []
    return super().visit_unhandled(action)

def convert_to_bestdori(story : Story, server : int = 0) -> dict[str, typing.Any]:
  result : dict[str, typing.Any] = {"server": server, "voice": ""}
  # 初始的背景和 BGM，后出现的覆盖先出现的
  start = 0
  for action in story.actions:
    if isinstance(action, ChangeBackgroundAction):
      result["background"] = resolve_path(action.path, True, "bg/")
    elif isinstance(action, ChangeBGMAction):
      result["bgm"] = resolve_path(action.path, False)
    else:
      break
    start += 1
  result["actions"] = BestdoriExportVisitor().convert_sequence(story.actions[start:], False)
  return result

def export_bestdori(story : Story | typing.Sequence[Story], path : str, server : int = 0):
  # 多个剧情时输出列表
  if isinstance(story, Story):
    toplevel : typing.Any = convert_to_bestdori(story, server)
  else:
    toplevel = [convert_to_bestdori(s, server) for s in story]
  with open(path, "w", newline="\n", encoding="utf-8") as f:
    json.dump(toplevel, f, ensure_ascii=False, indent=2)
