# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import json

from storypipe.storyir import *
from storypipe.bandori.asset import *
from storypipe.bandori.convert import convert_from_bandori, COMMON_SE_URL_BASE
from storypipe.util.message import MessageHandler

VOICE_BUNDLE = "jp/sound/voice/scenario/test01"

def _snippet(action_type : int, index : int, delay : float = 0.0, progress : int = 0) -> dict:
  return {"actionType": action_type, "referenceIndex": index, "delay": delay, "progressType": progress}

def _appear(character : int, costume : str, side : int = 4, **kwargs) -> dict:
  result = {"type": 2, "characterId": character, "costumeType": costume, "sideTo": side, "sideToOffsetX": 0}
  result.update(kwargs)
  return result

def _convert(**tables) -> Story:
  return convert_from_bandori(StoryAsset.from_json({"Base": tables}), "jp", VOICE_BUNDLE)

def test_unknown_enum_values():
  assert ActionType(99) == ActionType.NONE
  assert MoveSpeedType(42) == MoveSpeedType.NORMAL
  assert Snippet.from_json({"actionType": 12}).action_type == ActionType.NONE

def test_asset_without_base_wrapper():
  asset = StoryAsset.from_json({"scenarioSceneId": "abc", "snippets": [_snippet(1, 0)]})
  assert asset.scenario_scene_id == "abc"
  assert len(asset.snippets) == 1

def test_non_object_rows_keep_their_slot():
  asset = StoryAsset.from_json({"snippets": [_snippet(1, 1)], "talkData": [None, {"body": "second"}]})
  assert asset.talk_data == [TalkData(), TalkData(body="second")]
  assert convert_from_bandori(asset, "jp", VOICE_BUNDLE).actions == [TalkAction("second", (), ("",))]
  talk = TalkData.from_json({"voices": [7, {"voiceId": "v"}], "talkCharacters": ["x", {"characterId": 2}]})
  assert [v.voice_id for v in talk.voices] == ["", "v"]
  assert talk.talk_character_ids == [0, 2]

def test_load_story_asset(tmp_path):
  path = tmp_path / "scenario.json"
  data = {"Base": {"scenarioSceneId": "s01", "talkData": [{"body": "こんにちは", "talkCharacters": [{"characterId": 1}]}]}}
  path.write_bytes(json.dumps(data, ensure_ascii=False).encode("utf-8"))
  asset = load_story_asset(str(path))
  assert asset.scenario_scene_id == "s01"
  assert asset.talk_data[0].body == "こんにちは"
  assert asset.talk_data[0].talk_character_ids == [1]

def test_initial_state():
  story = _convert(firstBgm="BGM02", firstBackground="bg002", firstBackgroundBundleName="bg/scenario2_rip")
  assert story.actions == [
    ChangeBGMAction("jp/sound/scenario/bgm/bgm02/BGM02.mp3"),
    ChangeBackgroundAction("jp/bg/scenario2_rip/bg002.png"),
  ]
  assert _convert().actions == []

def test_talk():
  talk = {
    "talkCharacters": [{"characterId": 1}],
    "windowDisplayName": "香澄",
    "body": "おはよう！",
    "voices": [{"characterId": 1, "voiceId": "scenario01-001"}],
    "motions": [{"characterId": 1, "motionName": "smile01", "expressionName": "joy01"}],
  }
  story = _convert(snippets=[_snippet(1, 0)], talkData=[talk])
  assert story.actions == [
    TalkAction("おはよう！", (1,), ("香澄",), VOICE_BUNDLE + "/scenario01-001.mp3"),
    ActAction(1, "smile01"),
    ExpressAction(1, "joy01"),
  ]

def test_talk_without_voice():
  story = _convert(snippets=[_snippet(1, 0)], talkData=[{"body": "..."}])
  assert story.actions == [TalkAction("...", (), ("",), None)]

def test_delay_baselines():
  story = _convert(snippets=[_snippet(1, 0, 2.0), _snippet(1, 0, 2.0), _snippet(1, 0, 5.0)], talkData=[{"body": "a"}])
  delays = [a.seconds for a in story.actions if isinstance(a, DelayAction)]
  assert delays == [2.0, 0.0, 3.0]
  assert isinstance(story.actions[0], DelayAction)

def test_delay_baseline_stops_at_gating_snippet():
  snippets = [_snippet(1, 0, 2.0), _snippet(1, 0, 0.0, progress=1), _snippet(1, 0, 3.0)]
  story = _convert(snippets=snippets, talkData=[{"body": "a"}])
  assert story.actions[2] == WaitForAllAction()
  assert story.actions[4] == DelayAction(3.0)

def test_gating_snippet():
  story = _convert(snippets=[_snippet(1, 0, progress=1)], talkData=[{"body": "a"}])
  assert story.actions == [WaitForAllAction(), TalkAction("a", (), ("",))]

def test_unsupported_snippets(messages):
  story = _convert(snippets=[_snippet(3, 0), _snippet(1, 0), _snippet(5, 0), _snippet(1, 0)], talkData=[{"body": "a"}])
  assert story.actions == [TalkAction("a", (), ("",)), TalkAction("a", (), ("",))]
  assert messages.count(MessageHandler.MessageImportance.Error) == 2

def test_reference_out_of_range(messages):
  story = _convert(snippets=[_snippet(1, 5), _snippet(6, 0)], talkData=[{"body": "a"}])
  assert story.actions == []
  assert messages.count(MessageHandler.MessageImportance.Error) == 2

def test_appear_hide_appear_reuses_costume():
  layouts = [
    _appear(1, "001_casual"),
    {"type": 3, "characterId": 1},
    _appear(1, "", side=5),
  ]
  story = _convert(snippets=[_snippet(2, 0), _snippet(2, 1), _snippet(2, 2)], layoutData=layouts)
  assert story.actions == [
    ShowModelAction(1, "jp/live2d/chara/001_casual", Position(PositionBase.CENTER)),
    HideModelAction(1),
    ShowModelAction(1, "jp/live2d/chara/001_casual", Position(PositionBase.RIGHT)),
  ]

def test_appear_while_visible_becomes_move():
  layouts = [_appear(1, "001_casual"), _appear(2, "002_casual"), _appear(1, "", side=1, sideToOffsetX=30)]
  story = _convert(snippets=[_snippet(2, 0), _snippet(2, 1), _snippet(2, 2)], layoutData=layouts)
  assert story.actions[2] == MoveModelAction(1, Position(PositionBase.LEFT, 30.0))

def test_appear_with_unknown_costume(messages):
  story = _convert(snippets=[_snippet(2, 0)], layoutData=[_appear(2, "", motionName="bow01")])
  assert story.actions == [ActAction(2, "bow01")]
  assert messages.count(MessageHandler.MessageImportance.CriticalWarning) == 1

def test_side_none(messages):
  story = _convert(snippets=[_snippet(2, 0)], layoutData=[_appear(1, "001_casual", side=0)])
  assert story.actions == [ShowModelAction(1, "jp/live2d/chara/001_casual", Position(PositionBase.CENTER))]
  assert messages.count(MessageHandler.MessageImportance.CriticalWarning) == 1

def test_layout_kinds():
  layouts = [
    {"type": 1, "characterId": 1, "sideTo": 7, "sideToOffsetX": -5},
    {"type": 3, "characterId": 1, "motionName": "ignored"},
    {"type": 4, "characterId": 1},
    {"type": 5, "characterId": 1, "expressionName": "sad01"},
  ]
  snippets = [_snippet(2, 0), _snippet(2, 1), _snippet(2, 2), _snippet(2, 3), _snippet(4, 1)]
  story = _convert(snippets=snippets, layoutData=layouts)
  assert story.actions == [
    MoveModelAction(1, Position(PositionBase.RIGHT_INSIDE, -5.0)),
    HideModelAction(1),
    HorizontalShakeAction(1),
    VerticalShakeAction(1),
    ExpressAction(1, "sad01"),
    ActAction(1, "ignored"),
  ]

def test_effects():
  effects = [
    {"effectType": 2, "duration": 1.5},
    {"effectType": 1, "duration": 0.5},
    {"effectType": 4, "duration": 1.0},
    {"effectType": 3, "duration": 1.0},
    {"effectType": 5, "duration": 0.3},
    {"effectType": 6, "duration": 0.2},
    {"effectType": 8, "stringVal": "一日目"},
    {"effectType": 7, "stringVal": "bg/scenario1_rip", "stringValSub": "bg001"},
    {"effectType": 12},
  ]
  story = _convert(snippets=[_snippet(6, i) for i in range(len(effects))], specialEffectData=effects)
  assert story.actions == [
    ShowBlackCoverAction(1.5),
    HideBlackCoverAction(0.5),
    ShowWhiteCoverAction(1.0),
    HideWhiteCoverAction(1.0),
    ShakeScreenAction(0.3),
    ShakeDialogBoxAction(0.2),
    TelopAction("一日目"),
    ChangeBackgroundAction("jp/bg/scenario1_rip/bg001.png"),
  ]

def test_sound():
  sounds = [
    {"bgm": "BGM01"},
    {"se": "se_01"},
    {"se": "se_02", "seBundleName": "scenario_se"},
  ]
  story = _convert(snippets=[_snippet(7, i) for i in range(len(sounds))], soundData=sounds)
  assert story.actions == [
    ChangeBGMAction("jp/sound/scenario/bgm/bgm01/BGM01.mp3"),
    ChangeSEAction(COMMON_SE_URL_BASE + "se_01.mp3"),
    ChangeSEAction("jp/sound/se/scenario_se/se_02.mp3"),
  ]
