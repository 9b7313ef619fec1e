# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

import pytest

from storypipe.storyir import *
from storypipe.exceptions import SPInternalError

def _sample_story() -> Story:
  return Story("jp", [
    TalkAction("hello", [1], ["Kasumi"]),
    BlockingAction([
      DelayAction(1.0),
      ForkTaskAction([HideModelAction(1)]),
    ]),
    WaitForTapAction(),
  ])

def test_locale_get():
  assert Locale.get("JP") == Locale.JP
  assert Locale.get(Locale.CN) == Locale.CN
  with pytest.raises(ValueError):
    Locale.get("xx")

def test_lists_are_stored_as_tuples():
  talk = TalkAction("hi", [1, 2], ["a", "b"])
  assert talk.character_ids == (1, 2)
  assert talk.character_names == ("a", "b")
  group = BlockingAction([WaitForAllAction()])
  assert group.actions == (WaitForAllAction(),)
  assert hash(group) == hash(BlockingAction((WaitForAllAction(),)))

def test_position_names():
  for base in PositionBase:
    assert PositionBase.from_ir_name(base.get_ir_name()) == base
  assert PositionBase.LEFT_OUTSIDE.get_ir_name() == "leftOutside"
  assert Position.center() == Position(PositionBase.CENTER, 0.0)
  with pytest.raises(ValueError):
    PositionBase.from_ir_name("top")

def test_action_names_are_unique():
  names = [t.ACTION_NAME for t in ALL_ACTION_TYPES]
  assert len(set(names)) == len(names)
  for t in ALL_ACTION_TYPES:
    assert get_action_type_by_name(t.ACTION_NAME) is t
  with pytest.raises(SPInternalError):
    get_action_type_by_name("jump")

def test_display_name():
  assert TalkAction.get_display_name() == "Talk"
  assert ShowModelAction.get_display_name() == "ShowModel"
  assert ChangeBGMAction.get_display_name() == "ChangeBGM"

def test_walk_is_preorder():
  kinds = [type(a) for a in _sample_story().walk()]
  assert kinds == [TalkAction, BlockingAction, DelayAction, ForkTaskAction, HideModelAction, WaitForTapAction]

def test_visitor_dispatch():
  class Visitor(StepActionVisitorBase):
    def visitTalkAction(self, action):
      return "talk:" + action.text

  v = Visitor()
  assert TalkAction("x").accept(v) == "talk:x"
  with pytest.raises(SPInternalError):
    WaitForTapAction().accept(v)

def test_story_equality():
  assert _sample_story() == _sample_story()
  other = _sample_story()
  other.emit(WaitForAllAction())
  assert other != _sample_story()
  assert Story("jp") != Story("en")
