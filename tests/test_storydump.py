# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

from storypipe.storyir import *
from storypipe.storydump.export import convert_to_storydump, format_action

def _story() -> Story:
  return Story("jp", [
    TalkAction("Hello", [1], ["Kasumi"]),
    BlockingAction([DelayAction(1.0)]),
    WaitForTapAction(),
  ])

def test_closures():
  expected = (
    "# LOCALE: JP\n"
    "\n"
    "0 Talk(Hello, charID: [1], charName: [\"Kasumi\"], voicePath: nil)\n"
    "1 Blocking {\n"
    "  0 Delay(seconds: 1.0)\n"
    "}\n"
    "2 WaitForTap\n"
    "\n"
    "EOF."
  )
  assert convert_to_storydump(_story()) == expected

def test_without_closures():
  text = convert_to_storydump(_story(), allow_closures=False)
  assert "1 Blocking(array: [Delay(seconds: 1.0)])\n" in text

def test_empty_group():
  assert format_action(ForkTaskAction(), 0, True) == "ForkTask {}"

def test_position_and_escapes():
  show = ShowModelAction(2, "live2d/002", Position(PositionBase.LEFT_OUTSIDE, 5.0))
  assert format_action(show, 0, True) == "ShowModel(charID: 2, modelPath: live2d/002, position: {base: leftOutside, offsetX: 5.0})"
  talk = TalkAction("a\nb", [], ['say "hi"'], "v.mp3")
  assert format_action(talk, 0, True) == 'Talk(a\\nb, charID: [], charName: ["say \\"hi\\""], voicePath: v.mp3)'

def test_nested_indentation():
  story = Story("en", [ForkTaskAction([BlockingAction([ShakeScreenAction(0.5)])])])
  assert convert_to_storydump(story) == (
    "# LOCALE: EN\n"
    "\n"
    "0 ForkTask {\n"
    "  0 Blocking {\n"
    "    0 ShakeScreen(duration: 0.5)\n"
    "  }\n"
    "}\n"
    "\n"
    "EOF."
  )
