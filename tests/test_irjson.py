# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import json

import pytest

from storypipe.storyir import *
from storypipe.irjson import *
from storypipe.exceptions import SPInternalError

def _story() -> Story:
  return Story(Locale.TW, [
    ChangeBGMAction("tw/sound/scenario/bgm/bgm01/bgm01.mp3"),
    ShowModelAction(3, "tw/live2d/chara/003_school", Position(PositionBase.LEFT_INSIDE, -12.5)),
    TalkAction("你好", [3], ["花音"], None),
    ForkTaskAction([DelayAction(0.5), ExpressAction(3, "smile")]),
    ShakeDialogBoxAction(0.3),
    WaitForAllAction(),
  ])

def test_action_json_keys():
  data = action_to_json(ShowModelAction(3, "m", Position(PositionBase.RIGHT, 4.0)))
  assert data == {
    "kind": "showModel",
    "characterId": 3,
    "modelPath": "m",
    "position": {"base": "right", "offsetX": 4.0},
  }
  talk = action_to_json(TalkAction("t", [1], ["n"]))
  assert talk["characterIds"] == [1]
  assert talk["voicePath"] is None

def test_optional_fields_may_be_omitted():
  assert action_from_json({"kind": "talk", "text": "x"}) == TalkAction("x")
  assert action_from_json({"kind": "blocking"}) == BlockingAction()
  with pytest.raises(SPInternalError):
    action_from_json({"kind": "delay"})
  with pytest.raises(SPInternalError):
    action_from_json({"text": "x"})

def test_save_and_load(tmp_path):
  path = str(tmp_path / "story.json")
  save_story(_story(), path)
  with open(path, "r", encoding="utf-8") as f:
    raw = json.load(f)
  assert raw["locale"] == "tw"
  assert raw["actions"][3]["actions"][1] == {"kind": "express", "characterId": 3, "expressionName": "smile"}
  assert load_story(path) == _story()

def test_save_multiple(tmp_path):
  path = str(tmp_path / "stories.json")
  save_story([_story(), Story("jp")], path)
  loaded = load_story(path)
  assert isinstance(loaded, list)
  assert loaded == [_story(), Story("jp")]
