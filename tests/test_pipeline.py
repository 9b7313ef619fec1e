# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import json

import pytest

from storypipe import pipeline_cmd # 注册所有转换
from storypipe.pipeline import pipeline_main, TransformRegistration
from storypipe.storyir import *
from storypipe.testbench import build_test_story
from storypipe.irjson import load_story
from storypipe.plaintext.export import convert_to_plaintext
from storypipe.storydump.export import convert_to_storydump

def test_all_transforms_registered():
  flags = set(TransformRegistration._flag_to_type_dict.keys())
  assert {"load", "save", "dump", "bandori", "plaintext-export", "plaintext-import", "storydump", "bestdori-export", "test-story-build"} <= flags

def test_storydump_backend(tmp_path):
  out = tmp_path / "dump.txt"
  pipeline_main(["--test-story-build", "--storydump", str(out)])
  assert out.read_text(encoding="utf-8") == convert_to_storydump(build_test_story())

def test_storydump_without_closures(tmp_path):
  out = tmp_path / "dump.txt"
  pipeline_main(["--storydump", str(out), "--storydump-no-closures", "--test-story-build"])
  assert "Blocking(array: [" in out.read_text(encoding="utf-8")

def test_save_load_and_plaintext(tmp_path):
  ir = tmp_path / "story.json"
  text = tmp_path / "story.txt"
  pipeline_main(["--test-story-build", "--save", str(ir)])
  assert load_story(str(ir)) == build_test_story()
  pipeline_main(["--load", str(ir), "--plaintext-export", str(text)])
  assert text.read_text(encoding="utf-8") == convert_to_plaintext(build_test_story())

def test_plaintext_import(tmp_path):
  text = tmp_path / "story.txt"
  text.write_text(convert_to_plaintext(build_test_story()), encoding="utf-8")
  ir = tmp_path / "story.json"
  pipeline_main(["--plaintext-import", str(text), "--plaintext-import-locale", "jp", "--save", str(ir)])
  assert load_story(str(ir)) == build_test_story()

def test_multiple_stories(tmp_path):
  ir = tmp_path / "story.json"
  pipeline_main(["--test-story-build", "--save", str(ir)])
  combined = tmp_path / "combined.json"
  pipeline_main(["--load", str(ir), str(ir), "--save", str(combined)])
  assert load_story(str(combined)) == [build_test_story(), build_test_story()]
  dump = tmp_path / "dump.txt"
  pipeline_main(["--load", str(combined), "--storydump", str(dump)])
  single = convert_to_storydump(build_test_story())
  assert dump.read_text(encoding="utf-8") == single + "\n\n" + single

def test_bestdori_export(tmp_path):
  out = tmp_path / "bestdori.json"
  pipeline_main(["--test-story-build", "--bestdori-export", str(out), "--bestdori-server", "3"])
  with open(out, "r", encoding="utf-8") as f:
    data = json.load(f)
  assert data["server"] == 3
  assert data["background"] == {"type": "bandori", "file": "bg00001", "bundle": "bg/scenario0"}
  assert data["bgm"] == {"type": "bandori", "file": "bgm001"}
  assert (data["actions"][0]["layoutType"], data["actions"][0]["wait"]) == ("appear", False)
  assert (data["actions"][1]["type"], data["actions"][1]["wait"]) == ("motion", True)

def test_bandori_import(tmp_path):
  asset = {"Base": {
    "scenarioSceneId": "scenario01",
    "firstBgm": "BGM01",
    "snippets": [{"actionType": 1, "referenceIndex": 0}],
    "talkData": [{"body": "こんにちは", "windowDisplayName": "香澄", "talkCharacters": [{"characterId": 1}], "voices": [{"voiceId": "v001"}]}],
  }}
  src = tmp_path / "scenario01.json"
  src.write_text(json.dumps(asset, ensure_ascii=False), encoding="utf-8")
  ir = tmp_path / "story.json"
  pipeline_main(["--bandori", str(src), "--bandori-locale", "en", "--save", str(ir)])
  story = load_story(str(ir))
  assert story.locale == Locale.EN
  assert story.actions == [
    ChangeBGMAction("en/sound/scenario/bgm/bgm01/BGM01.mp3"),
    TalkAction("こんにちは", (1,), ("香澄",), "en/sound/voice/scenario/scenario01/v001.mp3"),
  ]

def test_backend_without_input(tmp_path):
  with pytest.raises(RuntimeError):
    pipeline_main(["--storydump", str(tmp_path / "dump.txt")])
