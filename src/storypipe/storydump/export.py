# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 调试用的结构化文本输出
#
# # LOCALE: JP
#
# 0 Talk(Hello, charID: [1], charName: ["Kasumi"], voicePath: nil)
# 1 Blocking {
#   0 Delay(seconds: 1.0)
# }
#
# EOF.

from __future__ import annotations

import typing

from ..storyir import *
from ..exceptions import SPInternalError

INDENT = "  "

def format_list_item(value : typing.Any) -> str:
  if isinstance(value, str):
    return '"' + value.replace('\\', '\\\\').replace('"', '\\"').replace('\n', '\\n') + '"'
  return format_value(value)

def format_value(value : typing.Any) -> str:
  match value:
    case None:
      return "nil"
    case str():
      return value
    case Position():
      return "{base: " + value.base.get_ir_name() + ", offsetX: " + repr(value.offset_x) + "}"
    case StepAction():
      return format_action(value, 0, False)
    case tuple() | list():
      return "[" + ", ".join(format_list_item(v) for v in value) + "]"
    case bool():
      return "true" if value else "false"
    case int() | float():
      return repr(value)
  raise SPInternalError("Unexpected value in story dump: " + type(value).__name__)

def get_action_params(action : StepAction) -> dict[str, typing.Any]:
  # 空字符串键为不带名称的主要参数
  match action:
    case TalkAction():
      return {"": action.text.replace("\n", "\\n"), "charID": action.character_ids, "charName": action.character_names, "voicePath": action.voice_path}
    case TelopAction():
      return {"": action.text}
    case ShowModelAction():
      return {"charID": action.character_id, "modelPath": action.model_path, "position": action.position}
    case MoveModelAction():
      return {"charID": action.character_id, "position": action.position}
    case ActAction():
      return {"charID": action.character_id, "motionName": action.motion_name}
    case ExpressAction():
      return {"charID": action.character_id, "expressionName": action.expression_name}
    case CharacterActionBase():
      return {"charID": action.character_id}
    case DurationActionBase():
      return {"duration": action.duration}
    case AssetChangeActionBase():
      return {"path": action.path}
    case DelayAction():
      return {"seconds": action.seconds}
    case WaitForTapAction() | WaitForAllAction():
      return {}
  raise SPInternalError("Unhandled action type: " + type(action).__name__)

def format_action(action : StepAction, depth : int, allow_closures : bool) -> str:
  name = action.get_display_name()
  if isinstance(action, ActionGroupBase):
    if not allow_closures:
      return name + "(array: " + format_value(action.actions) + ")"
    if len(action.actions) == 0:
      return name + " {}"
    return name + " {\n" + format_actions(action.actions, depth + 1, True) + INDENT * depth + "}"
  params = get_action_params(action)
  if len(params) == 0:
    return name
  items = []
  for key in sorted(params.keys()):
    value = format_value(params[key])
    items.append(value if len(key) == 0 else key + ": " + value)
  return name + "(" + ", ".join(items) + ")"

def format_actions(actions : typing.Sequence[StepAction], depth : int, allow_closures : bool) -> str:
  result = ""
  for index, action in enumerate(actions):
    result += INDENT * depth + str(index) + " " + format_action(action, depth, allow_closures) + "\n"
  return result

def convert_to_storydump(story : Story, allow_closures : bool = True) -> str:
  result = "# LOCALE: " + story.locale.value.upper() + "\n\n"
  result += format_actions(story.actions, 0, allow_closures)
  result += "\nEOF."
  return result
