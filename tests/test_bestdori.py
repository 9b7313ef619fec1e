# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import json

from storypipe.storyir import *
from storypipe.bestdori.export import convert_to_bestdori, export_bestdori, resolve_path, map_position

MODEL = "jp/live2d/chara/001_casual"

def test_resolve_path():
  assert resolve_path("https://bestdori.com/res/CommonSE/se_01.mp3", True) == {"type": "custom", "url": "https://bestdori.com/res/CommonSE/se_01.mp3"}
  assert resolve_path("jp/bg/scenario5_rip/bg00005.png", True, "bg/") == {"type": "bandori", "file": "bg00005", "bundle": "bg/scenario5"}
  assert resolve_path("jp/sound/scenario/bgm/bgm01/bgm01.mp3", False) == {"type": "bandori", "file": "bgm01"}
  assert resolve_path("noext", False) == {"type": "bandori", "file": "noext"}
  assert resolve_path("a/b_rip/c.d.mp3", True) == {"type": "bandori", "file": "c.d", "bundle": "b"}

def test_map_position():
  assert map_position(PositionBase.LEFT_OUTSIDE) == "leftOver"
  assert map_position(PositionBase.CENTER_BOTTOM) == "center"
  assert map_position(PositionBase.RIGHT) == "rightInside"

def test_initial_state_extraction():
  story = Story("jp", [
    ChangeBackgroundAction("jp/bg/scenario5_rip/bg00005.png"),
    ChangeBGMAction("jp/sound/scenario/bgm/bgm01/bgm01.mp3"),
    TelopAction("x"),
    ChangeBGMAction("jp/sound/scenario/bgm/bgm02/bgm02.mp3"),
  ])
  result = convert_to_bestdori(story, server=1)
  assert result["server"] == 1
  assert result["voice"] == ""
  assert result["background"] == {"type": "bandori", "file": "bg00005", "bundle": "bg/scenario5"}
  assert result["bgm"] == {"type": "bandori", "file": "bgm01"}
  assert [r["type"] for r in result["actions"]] == ["effect", "sound"]
  assert result["actions"][1]["bgm"] == {"type": "bandori", "file": "bgm02"}

def test_no_initial_state():
  result = convert_to_bestdori(Story("jp", [TelopAction("x")]))
  assert "background" not in result
  assert "bgm" not in result

def test_layout_positions_are_inferred():
  story = Story("jp", [
    ShowModelAction(1, MODEL, Position(PositionBase.LEFT)),
    MoveModelAction(1, Position(PositionBase.RIGHT, 10.0)),
    HideModelAction(1),
    HorizontalShakeAction(2),
  ])
  actions = convert_to_bestdori(story)["actions"]
  assert actions[0] == {
    "type": "layout", "delay": 0, "wait": False,
    "layoutType": "appear", "character": 1, "costume": "001_casual", "motion": "", "expression": "",
    "sideFrom": "leftInside", "sideFromOffsetX": 0, "sideTo": "leftInside", "sideToOffsetX": 0,
  }
  assert (actions[1]["layoutType"], actions[1]["sideFrom"], actions[1]["sideTo"], actions[1]["sideToOffsetX"]) == ("move", "leftInside", "rightInside", 10)
  assert (actions[2]["layoutType"], actions[2]["sideFrom"], actions[2]["sideFromOffsetX"], actions[2]["costume"]) == ("hide", "rightInside", 10, "001_casual")
  # 从未出场的角色默认在中间
  assert (actions[3]["layoutType"], actions[3]["sideFrom"], actions[3]["costume"]) == ("shakeX", "center", "")

def test_talk_and_motion():
  story = Story("jp", [
    ShowModelAction(1, MODEL, Position(PositionBase.CENTER)),
    TalkAction("hi", [1], ["香澄"], "v.mp3"),
    ActAction(1, "nod01"),
    ExpressAction(1, "smile01"),
  ])
  actions = convert_to_bestdori(story)["actions"]
  assert actions[1] == {
    "type": "talk", "delay": 0, "wait": True,
    "characters": [1], "name": "香澄", "body": "hi", "motions": [], "voices": [], "close": False,
  }
  assert (actions[2]["type"], actions[2]["costume"], actions[2]["motion"], actions[2]["expression"]) == ("motion", "001_casual", "nod01", "")
  assert (actions[3]["motion"], actions[3]["expression"]) == ("", "smile01")

def test_effects():
  story = Story("jp", [ShowBlackCoverAction(1.0), HideWhiteCoverAction(0.5), ShakeDialogBoxAction(0.2), ChangeSEAction("jp/sound/se/se_rip/se01.mp3")])
  actions = convert_to_bestdori(story)["actions"]
  assert actions[0] == {"type": "effect", "effectType": "blackOut", "delay": 0, "wait": False, "duration": 1.0}
  assert actions[1]["effectType"] == "whiteIn"
  assert actions[2]["effectType"] == "shakeWindow"
  assert actions[3]["se"] == {"type": "bandori", "file": "se01", "bundle": "se"}

def test_delay():
  story = Story("jp", [
    DelayAction(2.5),
    TelopAction("a"),
    TelopAction("b"),
    WaitForAllAction(),
    TelopAction("c"),
    WaitForTapAction(),
  ])
  actions = convert_to_bestdori(story)["actions"]
  assert [r["delay"] for r in actions] == [2, 2, 0]

def test_wait_flags():
  story = Story("jp", [
    BlockingAction([TelopAction("a"), TelopAction("b")]),
    ForkTaskAction([TelopAction("c"), TalkAction("d")]),
    TelopAction("e"),
  ])
  actions = convert_to_bestdori(story)["actions"]
  assert [(r.get("text", r.get("body")), r["wait"]) for r in actions] == [
    ("a", False), ("b", True), ("c", False), ("d", True), ("e", False),
  ]

def test_nested_sequences_have_own_delay():
  story = Story("jp", [
    DelayAction(3.0),
    ForkTaskAction([TelopAction("inner")]),
    TelopAction("outer"),
  ])
  actions = convert_to_bestdori(story)["actions"]
  assert [r["delay"] for r in actions] == [0, 3]

def test_export(tmp_path):
  path = str(tmp_path / "out.json")
  story = Story("jp", [TelopAction("テロップ")])
  export_bestdori(story, path, server=2)
  with open(path, "r", encoding="utf-8") as f:
    data = json.load(f)
  assert data["server"] == 2
  assert data["actions"][0]["text"] == "テロップ"
  export_bestdori([story, story], path)
  with open(path, "r", encoding="utf-8") as f:
    data = json.load(f)
  assert isinstance(data, list) and len(data) == 2
