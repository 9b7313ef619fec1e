# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 剧情 IR 的定义
# 一个剧情 (Story) 就是一个服务器区域标记加上一串有序的步骤动作 (StepAction)
# IR 本身不做任何检查，各种不变量由生成 IR 的转换器保证，后端读取时自行处理缺失的状态
#
# 时间相关的约定：
#   DelayAction 的秒数是相对于同一序列中上一个 DelayAction （或序列开头）的值，不是相对于上一条动作
#   BlockingAction 的内容执行完后才回到外层序列；ForkTaskAction 的内容与外层序列同时执行
#   WaitForAllAction 等待之前所有 ForkTaskAction 结束

from __future__ import annotations

import dataclasses
import enum
import typing

from .exceptions import SPInternalError

class Locale(enum.Enum):
  # 源游戏的服务器区域
  JP = "jp"
  EN = "en"
  TW = "tw"
  CN = "cn"
  KR = "kr"

  @staticmethod
  def get(value : str | Locale) -> Locale:
    if isinstance(value, Locale):
      return value
    return Locale(value.lower())

class PositionBase(enum.Enum):
  # 角色模型的十二个站位，值为文本格式中使用的编号，不能改动
  LEFT_OUTSIDE = 0
  LEFT = 1
  LEFT_INSIDE = 2
  LEFT_BOTTOM = 3
  LEFT_INSIDE_BOTTOM = 4
  CENTER = 5
  CENTER_BOTTOM = 6
  RIGHT_OUTSIDE = 7
  RIGHT = 8
  RIGHT_INSIDE = 9
  RIGHT_BOTTOM = 10
  RIGHT_INSIDE_BOTTOM = 11

  def get_ir_name(self) -> str:
    return _POSITION_BASE_IR_NAMES[self]

  @staticmethod
  def from_ir_name(name : str) -> PositionBase:
    for base, n in _POSITION_BASE_IR_NAMES.items():
      if n == name:
        return base
    raise ValueError("Unknown position base: " + name)

_POSITION_BASE_IR_NAMES : dict[PositionBase, str] = {
  PositionBase.LEFT_OUTSIDE : "leftOutside",
  PositionBase.LEFT : "left",
  PositionBase.LEFT_INSIDE : "leftInside",
  PositionBase.LEFT_BOTTOM : "leftBottom",
  PositionBase.LEFT_INSIDE_BOTTOM : "leftInsideBottom",
  PositionBase.CENTER : "center",
  PositionBase.CENTER_BOTTOM : "centerBottom",
  PositionBase.RIGHT_OUTSIDE : "rightOutside",
  PositionBase.RIGHT : "right",
  PositionBase.RIGHT_INSIDE : "rightInside",
  PositionBase.RIGHT_BOTTOM : "rightBottom",
  PositionBase.RIGHT_INSIDE_BOTTOM : "rightInsideBottom",
}

@dataclasses.dataclass(frozen=True)
class Position:
  base : PositionBase
  offset_x : float = 0.0

  @staticmethod
  def center() -> Position:
    return Position(PositionBase.CENTER, 0.0)

# ------------------------------------------------------------------------------
# 动作
# ------------------------------------------------------------------------------

@dataclasses.dataclass(frozen=True)
class StepAction:
  # 所有动作的基类，不应直接实例化
  # ACTION_NAME 用于 JSON 编码和调试输出，每个具体的动作类型都必须提供
  ACTION_NAME : typing.ClassVar[str] = ""

  def accept(self, visitor):
    # 与后端 AST 一样的访问者模式：调用 visitor.visit<类名>(self)
    visitfuncname = "visit" + self.__class__.__name__
    if hasattr(visitor, visitfuncname):
      return getattr(visitor, visitfuncname)(self)
    return visitor.visit_unhandled(self)

  def get_children(self) -> tuple[StepAction, ...] | None:
    return None

  @classmethod
  def get_display_name(cls) -> str:
    return cls.ACTION_NAME[0].upper() + cls.ACTION_NAME[1:]

class StepActionVisitorBase:
  def visit_unhandled(self, action : StepAction):
    raise SPInternalError("Unhandled action type: " + type(action).__name__)

@dataclasses.dataclass(frozen=True)
class TalkAction(StepAction):
  ACTION_NAME : typing.ClassVar[str] = "talk"
  text : str
  character_ids : tuple[int, ...] = ()
  character_names : tuple[str, ...] = ()
  voice_path : str | None = None

  def __post_init__(self):
    # 允许用 list 构造，内部统一保存为 tuple
    object.__setattr__(self, "character_ids", tuple(self.character_ids))
    object.__setattr__(self, "character_names", tuple(self.character_names))

@dataclasses.dataclass(frozen=True)
class TelopAction(StepAction):
  ACTION_NAME : typing.ClassVar[str] = "telop"
  text : str

@dataclasses.dataclass(frozen=True)
class CharacterActionBase(StepAction):
  character_id : int

@dataclasses.dataclass(frozen=True)
class ShowModelAction(CharacterActionBase):
  ACTION_NAME : typing.ClassVar[str] = "showModel"
  model_path : str
  position : Position

@dataclasses.dataclass(frozen=True)
class HideModelAction(CharacterActionBase):
  ACTION_NAME : typing.ClassVar[str] = "hideModel"

@dataclasses.dataclass(frozen=True)
class MoveModelAction(CharacterActionBase):
  ACTION_NAME : typing.ClassVar[str] = "moveModel"
  position : Position

@dataclasses.dataclass(frozen=True)
class ActAction(CharacterActionBase):
  ACTION_NAME : typing.ClassVar[str] = "act"
  motion_name : str

@dataclasses.dataclass(frozen=True)
class ExpressAction(CharacterActionBase):
  ACTION_NAME : typing.ClassVar[str] = "express"
  expression_name : str

@dataclasses.dataclass(frozen=True)
class HorizontalShakeAction(CharacterActionBase):
  ACTION_NAME : typing.ClassVar[str] = "horizontalShake"

@dataclasses.dataclass(frozen=True)
class VerticalShakeAction(CharacterActionBase):
  ACTION_NAME : typing.ClassVar[str] = "verticalShake"

@dataclasses.dataclass(frozen=True)
class DurationActionBase(StepAction):
  duration : float # 秒

@dataclasses.dataclass(frozen=True)
class ShowBlackCoverAction(DurationActionBase):
  ACTION_NAME : typing.ClassVar[str] = "showBlackCover"

@dataclasses.dataclass(frozen=True)
class HideBlackCoverAction(DurationActionBase):
  ACTION_NAME : typing.ClassVar[str] = "hideBlackCover"

@dataclasses.dataclass(frozen=True)
class ShowWhiteCoverAction(DurationActionBase):
  ACTION_NAME : typing.ClassVar[str] = "showWhiteCover"

@dataclasses.dataclass(frozen=True)
class HideWhiteCoverAction(DurationActionBase):
  ACTION_NAME : typing.ClassVar[str] = "hideWhiteCover"

@dataclasses.dataclass(frozen=True)
class ShakeScreenAction(DurationActionBase):
  ACTION_NAME : typing.ClassVar[str] = "shakeScreen"

@dataclasses.dataclass(frozen=True)
class ShakeDialogBoxAction(DurationActionBase):
  ACTION_NAME : typing.ClassVar[str] = "shakeDialogBox"

@dataclasses.dataclass(frozen=True)
class AssetChangeActionBase(StepAction):
  # 路径可以是绝对 URL 也可以是源格式的相对路径，如何解释由后端决定
  path : str

@dataclasses.dataclass(frozen=True)
class ChangeBackgroundAction(AssetChangeActionBase):
  ACTION_NAME : typing.ClassVar[str] = "changeBackground"

@dataclasses.dataclass(frozen=True)
class ChangeBGMAction(AssetChangeActionBase):
  ACTION_NAME : typing.ClassVar[str] = "changeBGM"

@dataclasses.dataclass(frozen=True)
class ChangeSEAction(AssetChangeActionBase):
  ACTION_NAME : typing.ClassVar[str] = "changeSE"

@dataclasses.dataclass(frozen=True)
class ActionGroupBase(StepAction):
  actions : tuple[StepAction, ...] = ()

  def __post_init__(self):
    object.__setattr__(self, "actions", tuple(self.actions))

  def get_children(self) -> tuple[StepAction, ...]:
    return self.actions

@dataclasses.dataclass(frozen=True)
class BlockingAction(ActionGroupBase):
  ACTION_NAME : typing.ClassVar[str] = "blocking"

@dataclasses.dataclass(frozen=True)
class ForkTaskAction(ActionGroupBase):
  ACTION_NAME : typing.ClassVar[str] = "forkTask"

@dataclasses.dataclass(frozen=True)
class DelayAction(StepAction):
  ACTION_NAME : typing.ClassVar[str] = "delay"
  seconds : float

@dataclasses.dataclass(frozen=True)
class WaitForTapAction(StepAction):
  ACTION_NAME : typing.ClassVar[str] = "waitForTap"

@dataclasses.dataclass(frozen=True)
class WaitForAllAction(StepAction):
  ACTION_NAME : typing.ClassVar[str] = "waitForAll"

# 所有具体动作类型，顺序即 IR 定义顺序
ALL_ACTION_TYPES : tuple[type[StepAction], ...] = (
  TalkAction,
  TelopAction,
  ShowModelAction,
  HideModelAction,
  MoveModelAction,
  ActAction,
  ExpressAction,
  HorizontalShakeAction,
  VerticalShakeAction,
  ShowBlackCoverAction,
  HideBlackCoverAction,
  ShowWhiteCoverAction,
  HideWhiteCoverAction,
  ShakeScreenAction,
  ShakeDialogBoxAction,
  ChangeBackgroundAction,
  ChangeBGMAction,
  ChangeSEAction,
  BlockingAction,
  DelayAction,
  ForkTaskAction,
  WaitForTapAction,
  WaitForAllAction,
)

def get_action_type_by_name(name : str) -> type[StepAction]:
  for t in ALL_ACTION_TYPES:
    if t.ACTION_NAME == name:
      return t
  raise SPInternalError("Unknown action kind: " + name)

def walk_actions(actions : typing.Iterable[StepAction]) -> typing.Iterator[StepAction]:
  # 前序遍历，包含 BlockingAction / ForkTaskAction 的内容
  for action in actions:
    yield action
    if children := action.get_children():
      yield from walk_actions(children)

class Story:
  locale : Locale
  actions : list[StepAction]

  def __init__(self, locale : Locale | str, actions : typing.Iterable[StepAction] | None = None) -> None:
    self.locale = Locale.get(locale)
    self.actions = list(actions) if actions is not None else []

  def emit(self, action : StepAction):
    self.actions.append(action)

  def walk(self) -> typing.Iterator[StepAction]:
    return walk_actions(self.actions)

  def __eq__(self, other : object) -> bool:
    if not isinstance(other, Story):
      return NotImplemented
    return self.locale == other.locale and self.actions == other.actions

  def __repr__(self) -> str:
    return "Story(" + self.locale.value + ", " + str(len(self.actions)) + " actions)"
