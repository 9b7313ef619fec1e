# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 剧情 IR 的 JSON 存取
# 格式： {"locale": "jp", "actions": [{"kind": "talk", "text": ..., ...}, ...]}
# 每个动作的键名就是 IR 字段名的小驼峰形式（character_ids -> characterIds）
# 站位为 {"base": "leftOutside", "offsetX": 0.0}，BlockingAction / ForkTaskAction 的内容在 "actions" 中

from __future__ import annotations

import dataclasses
import enum
import json
import typing

from .storyir import *
from .exceptions import SPInternalError

class IRJsonRepr(enum.Enum):
  # JSON 对象中所使用的固定的键
  STORY_LOCALE = "locale"
  STORY_ACTIONS = "actions"
  ACTION_KIND = "kind"
  POSITION_BASE = "base"
  POSITION_OFFSET_X = "offsetX"

def _field_to_key(name : str) -> str:
  parts = name.split('_')
  return parts[0] + ''.join(p[0].upper() + p[1:] for p in parts[1:] if len(p) > 0)

def position_to_json(position : Position) -> dict:
  return {
    IRJsonRepr.POSITION_BASE.value : position.base.get_ir_name(),
    IRJsonRepr.POSITION_OFFSET_X.value : position.offset_x,
  }

def position_from_json(data : dict) -> Position:
  try:
    base = PositionBase.from_ir_name(data[IRJsonRepr.POSITION_BASE.value])
  except (KeyError, ValueError) as e:
    raise SPInternalError("Invalid position: " + str(data)) from e
  return Position(base, float(data.get(IRJsonRepr.POSITION_OFFSET_X.value, 0.0)))

def action_to_json(action : StepAction) -> dict:
  result : dict[str, typing.Any] = {IRJsonRepr.ACTION_KIND.value : action.ACTION_NAME}
  for f in dataclasses.fields(action):
    value = getattr(action, f.name)
    match value:
      case Position():
        value = position_to_json(value)
      case tuple():
        value = [action_to_json(v) if isinstance(v, StepAction) else v for v in value]
    result[_field_to_key(f.name)] = value
  return result

def action_from_json(data : dict) -> StepAction:
  kind = data.get(IRJsonRepr.ACTION_KIND.value)
  if not isinstance(kind, str):
    raise SPInternalError("Action without kind: " + str(data))
  action_type = get_action_type_by_name(kind)
  kwargs : dict[str, typing.Any] = {}
  for f in dataclasses.fields(action_type):
    key = _field_to_key(f.name)
    if key not in data:
      # 只有可选的字段可以省略
      if f.default is dataclasses.MISSING:
        raise SPInternalError("Action " + kind + " missing field " + key)
      continue
    value = data[key]
    if f.name == "position":
      value = position_from_json(value)
    elif f.name == "actions":
      value = [action_from_json(v) for v in value]
    kwargs[f.name] = value
  return action_type(**kwargs)

def story_to_json(story : Story) -> dict:
  return {
    IRJsonRepr.STORY_LOCALE.value : story.locale.value,
    IRJsonRepr.STORY_ACTIONS.value : [action_to_json(a) for a in story.actions],
  }

def story_from_json(data : dict) -> Story:
  try:
    locale = Locale.get(data[IRJsonRepr.STORY_LOCALE.value])
  except (KeyError, ValueError) as e:
    raise SPInternalError("Invalid story locale") from e
  actions = [action_from_json(a) for a in data.get(IRJsonRepr.STORY_ACTIONS.value, [])]
  return Story(locale, actions)

def save_story(story : Story | typing.Sequence[Story], path : str):
  # 多个剧情时保存为列表
  if isinstance(story, Story):
    toplevel : typing.Any = story_to_json(story)
  else:
    toplevel = [story_to_json(s) for s in story]
  with open(path, "w", newline="\n", encoding="utf-8") as f:
    json.dump(toplevel, f, allow_nan=False, ensure_ascii=False, indent=2)

def load_story(path : str) -> Story | list[Story]:
  with open(path, "r", encoding="utf-8") as f:
    toplevel = json.load(f)
  if isinstance(toplevel, list):
    return [story_from_json(s) for s in toplevel]
  return story_from_json(toplevel)
