# SPDX-FileCopyrightText: 2025 StoryPipe's Contributors
# SPDX-License-Identifier: Apache-2.0

# 将 Bandori 的剧情资源转换为剧情 IR
# 资源中的每个 snippet 引用 talk/layout/effect/sound 四个表中的一项，按顺序转换
# 资源中省略了不少“当前状态”（比如角色的服装），需要往前找

from __future__ import annotations

import typing

from ..storyir import *
from ..language import TranslationDomain
from ..util.message import MessageHandler
from .asset import *

TR_bandori = TranslationDomain("bandori")

_tr_side_none = TR_bandori.tr("side_none",
  en="Layout side 'none' is not supported; treated as 'center'.",
  zh_cn="站位 'none' 不受支持，按 'center' 处理。",
  zh_hk="站位 'none' 不受支持，按 'center' 處理。",
)
_tr_costume_unresolved = TR_bandori.tr("costume_unresolved",
  en="Live2D model for character {character} is never defined before it appears; the appearance is skipped.",
  zh_cn="角色 {character} 出场前从未指定 Live2D 模型，跳过该出场。",
  zh_hk="角色 {character} 出場前從未指定 Live2D 模型，跳過該出場。",
)
_tr_action_unsupported = TR_bandori.tr("action_unsupported",
  en="The '{action}' action is not supported in the story IR. Skipping.",
  zh_cn="剧情 IR 不支持 '{action}' 动作，跳过。",
  zh_hk="劇情 IR 不支持 '{action}' 動作，跳過。",
)
_tr_index_out_of_range = TR_bandori.tr("index_out_of_range",
  en="Snippet {snippet} references {table}[{index}] which does not exist (table size {size}). Skipping.",
  zh_cn="第 {snippet} 个 snippet 引用的 {table}[{index}] 不存在（表大小为 {size}），跳过。",
  zh_hk="第 {snippet} 個 snippet 引用的 {table}[{index}] 不存在（表大小為 {size}），跳過。",
)

_SIDE_TO_POSITION_BASE : dict[Side, PositionBase] = {
  Side.LEFT : PositionBase.LEFT,
  Side.LEFT_OVER : PositionBase.LEFT_OUTSIDE,
  Side.LEFT_INSIDE : PositionBase.LEFT_INSIDE,
  Side.CENTER : PositionBase.CENTER,
  Side.RIGHT : PositionBase.RIGHT,
  Side.RIGHT_OVER : PositionBase.RIGHT_OUTSIDE,
  Side.RIGHT_INSIDE : PositionBase.RIGHT_INSIDE,
  Side.LEFT_UNDER : PositionBase.LEFT_BOTTOM,
  Side.LEFT_INSIDE_UNDER : PositionBase.LEFT_INSIDE_BOTTOM,
  Side.CENTER_UNDER : PositionBase.CENTER_BOTTOM,
  Side.RIGHT_UNDER : PositionBase.RIGHT_BOTTOM,
  Side.RIGHT_INSIDE_UNDER : PositionBase.RIGHT_INSIDE_BOTTOM,
}

def map_side(side : Side) -> PositionBase:
  if base := _SIDE_TO_POSITION_BASE.get(side):
    return base
  MessageHandler.critical_warning(_tr_side_none.get())
  return PositionBase.CENTER

COMMON_SE_URL_BASE = "https://bestdori.com/res/CommonSE/"

_RecordType = typing.TypeVar("_RecordType")

class BandoriConverter:
  asset : StoryAsset
  locale : Locale
  voice_bundle_path : str
  story : Story

  def __init__(self, asset : StoryAsset, locale : Locale, voice_bundle_path : str) -> None:
    self.asset = asset
    self.locale = locale
    self.voice_bundle_path = voice_bundle_path
    self.story = Story(locale)

  def get_bgm_path(self, bgm : str) -> str:
    return self.locale.value + "/sound/scenario/bgm/" + bgm.lower() + "/" + bgm + ".mp3"

  def get_background_path(self, bundle : str, name : str) -> str:
    return self.locale.value + "/" + bundle + "/" + name + ".png"

  def get_model_path(self, costume : str) -> str:
    return self.locale.value + "/live2d/chara/" + costume

  def _get_record(self, table : list[_RecordType], tablename : str, snippet_index : int, index : int) -> _RecordType | None:
    if 0 <= index < len(table):
      return table[index]
    MessageHandler.error(_tr_index_out_of_range.format(snippet=str(snippet_index), table=tablename, index=str(index), size=str(len(table))))
    return None

  def convert(self) -> Story:
    # 初始的 BGM 和背景
    if len(self.asset.first_bgm) > 0:
      self.story.emit(ChangeBGMAction(self.get_bgm_path(self.asset.first_bgm)))
    if len(self.asset.first_background) > 0:
      self.story.emit(ChangeBackgroundAction(self.get_background_path(self.asset.first_background_bundle_name, self.asset.first_background)))
    for index in range(len(self.asset.snippets)):
      for action in self.convert_snippet(index):
        self.story.emit(action)
    return self.story

  def convert_snippet(self, index : int) -> list[StepAction]:
    snippet = self.asset.snippets[index]
    result : list[StepAction] = []
    if snippet.progress_type == 1:
      result.append(WaitForAllAction())
    match snippet.action_type:
      case ActionType.NONE:
        pass
      case ActionType.TALK:
        if talk := self._get_record(self.asset.talk_data, "talkData", index, snippet.reference_index):
          self.convert_talk(talk, result)
      case ActionType.LAYOUT | ActionType.MOTION:
        if layout := self._get_record(self.asset.layout_data, "layoutData", index, snippet.reference_index):
          self.convert_layout(layout, snippet, result)
      case ActionType.INPUT:
        MessageHandler.error(_tr_action_unsupported.format(action="input"))
      case ActionType.SELECTABLE:
        MessageHandler.error(_tr_action_unsupported.format(action="selectable"))
      case ActionType.EFFECT:
        if effect := self._get_record(self.asset.special_effect_data, "specialEffectData", index, snippet.reference_index):
          self.convert_effect(effect, result)
      case ActionType.SOUND:
        if sound := self._get_record(self.asset.sound_data, "soundData", index, snippet.reference_index):
          self.convert_sound(sound, result)
    if snippet.delay > 0:
      result.insert(0, DelayAction(snippet.delay - self.get_previous_delay(index)))
    return result

  def get_previous_delay(self, index : int) -> float:
    # 往前找最近的有延迟的 snippet，碰到需要等待的 snippet 就停
    for prev in reversed(self.asset.snippets[:index]):
      if prev.progress_type == 1:
        break
      if prev.delay > 0:
        return prev.delay
    return 0.0

  def convert_talk(self, talk : TalkData, result : list[StepAction]):
    voice_path = None
    if len(talk.voices) > 0:
      voice_path = self.voice_bundle_path + "/" + talk.voices[0].voice_id + ".mp3"
    result.append(TalkAction(talk.body, talk.talk_character_ids, [talk.window_display_name], voice_path))
    for motion in talk.motions:
      self.emit_motion(motion.character_id, motion.motion_name, motion.expression_name, result)

  @staticmethod
  def emit_motion(character_id : int, motion_name : str, expression_name : str, result : list[StepAction]):
    if len(motion_name) > 0:
      result.append(ActAction(character_id, motion_name))
    if len(expression_name) > 0:
      result.append(ExpressAction(character_id, expression_name))

  def convert_layout(self, layout : LayoutData, snippet : Snippet, result : list[StepAction]):
    if snippet.action_type == ActionType.LAYOUT:
      match layout.type:
        case LayoutType.NONE:
          pass
        case LayoutType.MOVE:
          result.append(MoveModelAction(layout.character_id, self.get_target_position(layout)))
        case LayoutType.APPEAR:
          self.convert_appear(layout, snippet.reference_index, result)
        case LayoutType.HIDE:
          result.append(HideModelAction(layout.character_id))
        case LayoutType.SHAKE_X:
          result.append(HorizontalShakeAction(layout.character_id))
        case LayoutType.SHAKE_Y:
          result.append(VerticalShakeAction(layout.character_id))
    if layout.type != LayoutType.HIDE or snippet.action_type == ActionType.MOTION:
      self.emit_motion(layout.character_id, layout.motion_name, layout.expression_name, result)

  @staticmethod
  def get_target_position(layout : LayoutData) -> Position:
    return Position(map_side(layout.side_to), float(layout.side_to_offset_x))

  def convert_appear(self, layout : LayoutData, reference_index : int, result : list[StepAction]):
    costume = layout.costume_type
    if len(costume) == 0:
      # 同一服装再次出场时资源里会省略服装名，需要往前找
      for prev in reversed(self.asset.layout_data[:reference_index + 1]):
        if prev.character_id == layout.character_id and len(prev.costume_type) > 0:
          costume = prev.costume_type
          break
      if len(costume) == 0:
        MessageHandler.critical_warning(_tr_costume_unresolved.format(character=str(layout.character_id)))
        return
    has_appeared = False
    for prev in reversed(self.asset.layout_data[:reference_index]):
      if prev.character_id != layout.character_id:
        continue
      if prev.type == LayoutType.HIDE:
        break
      if prev.type in (LayoutType.APPEAR, LayoutType.MOVE):
        has_appeared = True
        break
    position = self.get_target_position(layout)
    if has_appeared:
      result.append(MoveModelAction(layout.character_id, position))
    else:
      result.append(ShowModelAction(layout.character_id, self.get_model_path(costume), position))

  def convert_effect(self, effect : SpecialEffectData, result : list[StepAction]):
    match effect.effect_type:
      case EffectType.BLACK_IN:
        result.append(HideBlackCoverAction(effect.duration))
      case EffectType.BLACK_OUT:
        result.append(ShowBlackCoverAction(effect.duration))
      case EffectType.WHITE_IN:
        result.append(HideWhiteCoverAction(effect.duration))
      case EffectType.WHITE_OUT:
        result.append(ShowWhiteCoverAction(effect.duration))
      case EffectType.SHAKE_SCREEN:
        result.append(ShakeScreenAction(effect.duration))
      case EffectType.SHAKE_WINDOW:
        result.append(ShakeDialogBoxAction(effect.duration))
      case EffectType.CHANGE_BACKGROUND | EffectType.CHANGE_BACKGROUND_STILL | EffectType.CHANGE_CARD_STILL:
        result.append(ChangeBackgroundAction(self.get_background_path(effect.string_val, effect.string_val_sub)))
      case EffectType.TELOP:
        result.append(TelopAction(effect.string_val))
      case EffectType.PLAY_SCENARIO_EFFECT:
        # 大部分场景特效依赖 Unity 的动画对象，无法转换，只处理换背景
        if effect.string_val.startswith("bgchange"):
          result.append(ChangeBackgroundAction(self.locale.value + "/" + effect.string_val_sub + "/bg.png"))
      case _:
        pass

  def convert_sound(self, sound : SoundData, result : list[StepAction]):
    if len(sound.bgm) > 0:
      result.append(ChangeBGMAction(self.get_bgm_path(sound.bgm)))
    if len(sound.se) > 0:
      if len(sound.se_bundle_name) > 0:
        result.append(ChangeSEAction(self.locale.value + "/sound/se/" + sound.se_bundle_name + "/" + sound.se + ".mp3"))
      else:
        result.append(ChangeSEAction(COMMON_SE_URL_BASE + sound.se + ".mp3"))

def convert_from_bandori(asset : StoryAsset, locale : Locale | str, voice_bundle_path : str) -> Story:
  return BandoriConverter(asset, Locale.get(locale), voice_bundle_path).convert()
