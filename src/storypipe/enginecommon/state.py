# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 后端共用的状态追踪
# IR 中的动作只记录变化，不记录“当前状态”（比如 HideModelAction 不带位置），有的输出格式需要这些状态
# 我们对每个平坦的动作序列做一次正向遍历，边遍历边更新：
#   角色 -> 最后一次 ShowModelAction / MoveModelAction 的位置
#   角色 -> 最后一次 ShowModelAction 的模型路径
#   最近一次 DelayAction 的秒数（碰到 WaitForAllAction 时归零）
# BlockingAction / ForkTaskAction 的内容是另一个序列，需要另开一个 SequenceState

from __future__ import annotations

from ..storyir import *

class SequenceState:
  positions : dict[int, Position]
  model_paths : dict[int, str]
  delay : float

  def __init__(self) -> None:
    self.positions = {}
    self.model_paths = {}
    self.delay = 0.0

  def get_position(self, character_id : int) -> Position:
    # 找不到的话默认在中间
    if pos := self.positions.get(character_id):
      return pos
    return Position.center()

  def get_model_path(self, character_id : int) -> str | None:
    return self.model_paths.get(character_id)

  def update(self, action : StepAction):
    # 在处理完 action 之后调用
    match action:
      case ShowModelAction():
        self.positions[action.character_id] = action.position
        self.model_paths[action.character_id] = action.model_path
      case MoveModelAction():
        self.positions[action.character_id] = action.position
      case DelayAction():
        self.delay = action.seconds
      case WaitForAllAction():
        self.delay = 0.0
      case _:
        pass
