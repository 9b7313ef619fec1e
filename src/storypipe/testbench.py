# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

from .pipeline import *
from .storyir import *

def build_test_story() -> Story:
  story = Story(Locale.JP)
  story.emit(ChangeBackgroundAction("bg/scenario0_rip/bg00001.png"))
  story.emit(ChangeBGMAction("sound/bgm/bgm001.mp3"))
  story.emit(BlockingAction((
    ShowModelAction(1, "live2d/chara/001_casual-2023", Position(PositionBase.LEFT)),
    ExpressAction(1, "smile01"),
  )))
  story.emit(TalkAction("テスト1", (1,), ("香澄",), "jp/sound/voice/scenario/test/scenario0-001"))
  story.emit(ForkTaskAction((
    DelayAction(1.5),
    MoveModelAction(1, Position(PositionBase.RIGHT)),
  )))
  story.emit(WaitForAllAction())
  story.emit(TelopAction("テスト2"))
  story.emit(ShakeScreenAction(0.5))
  story.emit(HideModelAction(1))
  story.emit(WaitForTapAction())
  return story

@FrontendDecl('test-story-build', input_decl=IODecl(description='<No Input>', nargs=0), output_decl=Story)
class _TestStoryBuild(TransformBase):
  def run(self) -> Story:
    return build_test_story()
